import random
import string
import pytest
from stackbuild.PARSERS.build_arg_parser import BuildArgParser
from stackbuild.PARSERS.manifest_parser import ManifestParser
from stackbuild.exceptions import ManifestError

def random_string(length):
    return ''.join(random.choice(string.printable) for _ in range(length))

def test_fuzz_build_arg_parser():
    parser = BuildArgParser()
    for _ in range(100):
        content = random_string(random.randint(0, 1000))
        names = parser.parse_from_string(content)
        assert all(name and '=' not in name for name in names)

def test_fuzz_build_arg_lines():
    parser = BuildArgParser()
    for _ in range(100):
        line = "ARG " + random_string(random.randint(0, 50))
        parser.parse_from_string(line)

def test_fuzz_manifest_parser():
    parser = ManifestParser()
    for _ in range(100):
        content = random_string(random.randint(0, 1000))
        try:
            parser.parse_from_string(content)
        except ManifestError:
            pass

def test_edge_cases_parsers():
    parser = BuildArgParser()

    assert parser.parse_from_string("") == []
    assert parser.parse_from_string("   \n\t  ") == []
    assert parser.parse_from_string("ARG " + "a" * 10000) == ["a" * 10000]
    assert parser.parse_from_string("ARG A \\\n" * 100) == ["A"]
