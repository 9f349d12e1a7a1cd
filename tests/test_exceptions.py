import unittest

from netstring_stream.exceptions import (
    ErrorKind,
    IncompleteNetstring,
    InvalidNetstring,
    LengthOverflow,
    LengthRejected,
    NetstringError,
    NetstringIOError,
    error_kind_table,
)


class ErrorKindTableTests(unittest.TestCase):

    def test_every_kind_has_exactly_one_class(self):
        self.assertEqual(set(error_kind_table), set(ErrorKind))
        for kind, cls in error_kind_table.items():
            with self.subTest(kind=kind):
                self.assertTrue(issubclass(cls, NetstringError))
                self.assertEqual(cls.kind, kind)

    def test_messages(self):
        self.assertEqual(LengthRejected(42).message, "netstring length 42 rejected")
        self.assertEqual(str(IncompleteNetstring(10, 6)),
                         "expected 10 payload bytes, stream ended after 6")
        self.assertEqual(InvalidNetstring("invalid format, missing comma", ord('B')).message,
                         "invalid format, missing comma, found b'B'")
        self.assertIn("64 bits", LengthOverflow().message)

    def test_io_error_keeps_cause(self):
        cause = OSError("boom")
        err = NetstringIOError("stream read failed: boom", cause)
        self.assertIs(err.cause, cause)
        self.assertIsNone(NetstringIOError("unexpected end of stream").cause)


if __name__ == '__main__':
    unittest.main()
