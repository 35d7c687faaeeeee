import chardiff
import contextlib
import io
import os
import tempfile
import unittest


from rich.console import Console


class ChardiffTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def write(self, name, text, encoding='utf-8'):
        path = os.path.join(self.tmp.name, name)
        with open(path, 'w', encoding=encoding, newline='') as f:
            f.write(text)
        return path

    def run_main(self, *args):
        out = io.StringIO()
        err = io.StringIO()
        console = Console(file=out, width=200, color_system=None)
        with contextlib.redirect_stderr(err):
            status = chardiff.main(list(args), console)
        return status, out.getvalue().splitlines(), err.getvalue()

    def test_identical(self):
        path1 = self.write('a.txt', 'same\n')
        path2 = self.write('b.txt', 'same\n')
        status, lines, _ = self.run_main(path1, path2)
        self.assertEqual(status, 0)
        self.assertEqual(lines, ['Files are identical ✓'])

    def test_changes(self):
        path1 = self.write('a.txt', 'abcd')
        path2 = self.write('b.txt', 'abefgh')
        status, lines, _ = self.run_main(path1, path2)
        self.assertEqual(status, 0)
        self.assertEqual(lines, [
            "Insertion 'h' at position 5",
            "Insertion 'g' at position 4",
            "Substitution 'd' with 'f' at position 3",
            "Substitution 'c' with 'e' at position 2",
        ])

    def test_forward(self):
        path1 = self.write('a.txt', 'abcd')
        path2 = self.write('b.txt', 'abedf')
        status, lines, _ = self.run_main('--forward', path1, path2)
        self.assertEqual(status, 0)
        self.assertEqual(lines, [
            "Substitution 'c' with 'e' at position 2",
            "Insertion 'f' at position 4",
        ])

    def test_deletion_of_newline(self):
        path1 = self.write('a.txt', 'ab\n')
        path2 = self.write('b.txt', 'ab')
        status, lines, _ = self.run_main(path1, path2)
        self.assertEqual(status, 0)
        self.assertEqual(lines, ["Deletion '\\n' at position 2"])

    def test_encoding(self):
        path1 = self.write('a.txt', 'naïve', encoding='latin-1')
        path2 = self.write('b.txt', 'naive', encoding='latin-1')
        status, lines, _ = self.run_main('-e', 'latin-1', path1, path2)
        self.assertEqual(status, 0)
        self.assertEqual(lines, ["Substitution 'ï' with 'i' at position 2"])

    def test_undecodable(self):
        path1 = self.write('a.txt', 'naïve', encoding='latin-1')
        path2 = self.write('b.txt', 'naive')
        status, lines, err = self.run_main(path1, path2)
        self.assertEqual(status, 1)
        self.assertEqual(lines, [])
        self.assertTrue(err.startswith('chardiff: '))

    def test_missing_file(self):
        path1 = self.write('a.txt', 'abc')
        status, lines, err = self.run_main(path1, os.path.join(self.tmp.name, 'nope'))
        self.assertEqual(status, 1)
        self.assertEqual(lines, [])
        self.assertIn('nope', err)

    def test_too_large(self):
        path1 = self.write('a.txt', 'abcd')
        path2 = self.write('b.txt', 'abcd')
        status, lines, err = self.run_main('--max-cells', '10', path1, path2)
        self.assertEqual(status, 1)
        self.assertEqual(lines, [])
        self.assertIn('limit is 10', err)

    def test_usage(self):
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as cm:
                chardiff.main([])
        self.assertEqual(cm.exception.code, 2)
