import io
import signal
import tempfile
import unittest
from argparse import Namespace
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from murbloom import BloomFilter, InvalidArgument, hash_string
from murbloom.cli import main, make_filter, parse


class TestCli(unittest.TestCase):

    def run_commands(self, bf, commands):
        out = io.StringIO()
        parse(io.StringIO(commands), bf, out=out)
        return out.getvalue().splitlines()

    def test_insert_and_check(self):
        bf = BloomFilter(1024, 3)
        lines = self.run_commands(bf, 'p apple\na apple\nc apple\ng pear\n')
        self.assertEqual(lines, ['true', 'false', 'true', 'false'])

    def test_quoted_keys(self):
        bf = BloomFilter(1024, 3)
        lines = self.run_commands(bf, 'p "two words"\nc "two words"\nc two\n')
        self.assertEqual(lines, ['true', 'true', 'false'])
        self.assertTrue(bf.might_contain('two words'))

    def test_hash_and_info(self):
        bf = BloomFilter(64, 2, fast_hash=True)
        lines = self.run_commands(bf, 'h foo\np foo\ni\n')
        self.assertEqual(lines[0], str(hash_string('foo')))
        self.assertEqual(lines[0], '-156908512')
        self.assertEqual(lines[2], f'64 2 true {bf.bits_set}')

    def test_quit_stops_reading(self):
        bf = BloomFilter(1024, 3)
        lines = self.run_commands(bf, 'p apple\nq\np pear\n')
        self.assertEqual(lines, ['true'])
        self.assertFalse(bf.might_contain('pear'))

    def test_malformed_commands(self):
        bf = BloomFilter(1024, 3)
        err = io.StringIO()
        with redirect_stderr(err):
            lines = self.run_commands(bf, '\np\nx apple\nc apple\n')
        self.assertEqual(lines, ['false'])
        self.assertIn('malformed command.', err.getvalue())
        self.assertIn("unknown command 'x'.", err.getvalue())

    def test_make_filter(self):
        args = Namespace(sizing='explicit', bits=100, hashes=4, fast=True, encoding='utf-8')
        bf = make_filter(args)
        self.assertEqual((bf.num_bits, bf.num_hash_functions, bf.fast_hash), (100, 4, True))

        args = Namespace(sizing='capacity', insertions=100, fpp=0.01, fast=False, encoding='latin-1')
        bf = make_filter(args)
        self.assertEqual((bf.num_bits, bf.num_hash_functions, bf.encoding), (958, 7, 'latin-1'))

        args = Namespace(sizing='capacity', insertions=0, fpp=0.01, fast=False, encoding='utf-8')
        with self.assertRaises(InvalidArgument):
            make_filter(args)

    def test_main_rejects_invalid_sizing(self):
        err = io.StringIO()
        with redirect_stderr(err), self.assertRaises(SystemExit) as cm:
            main(['explicit', '--bits', '0', '--hashes', '1'])
        self.assertEqual(cm.exception.code, 2)
        self.assertIn('Length of bitset must be positive.', err.getvalue())

    def test_main_reads_file_as_utf8(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / 'commands'
            path.write_text('p café\nc café\nc cafe\n', encoding='utf-8')
            out = io.StringIO()
            previous_handler = signal.getsignal(signal.SIGINT)
            try:
                with redirect_stdout(out):
                    main(['-f', str(path), 'explicit', '--bits', '1024', '--hashes', '3'])
            finally:
                signal.signal(signal.SIGINT, previous_handler)
        self.assertEqual(out.getvalue().splitlines(), ['true', 'true', 'false'])

    def test_main_without_sizing_prints_help(self):
        out = io.StringIO()
        with redirect_stdout(out), self.assertRaises(SystemExit) as cm:
            main([])
        self.assertEqual(cm.exception.code, 0)
        self.assertIn('usage: murbloom', out.getvalue())


if __name__ == "__main__":
    unittest.main()
