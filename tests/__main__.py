import sys
import unittest

def main():
    verbose = 1
    pattern = '*'
    if len(sys.argv) > 1:
        pattern = sys.argv[1]
    test_loader = unittest.defaultTestLoader
    test_runner = unittest.TextTestRunner(verbosity=verbose)
    pattern = pattern + "_test.py"
    test_suite = test_loader.discover("./tests", pattern=pattern, top_level_dir=".")
    result = test_runner.run(test_suite)
    return 0 if result.wasSuccessful() else 1


if __name__ == '__main__':
    sys.exit(main())
