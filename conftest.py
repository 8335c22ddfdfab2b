import glob
import os

import pytest


def read_test_config(test_config_path):

    test_config = {}
    with open(test_config_path) as test_config_file:
        for line_num, l in enumerate(test_config_file, start=1):

            l_splits = l.strip('\n').split("=")
            l_splits = [s.strip() for s in l_splits]

            if len(l_splits) < 2:
                continue

            input_option = l_splits[0]
            input_value = l_splits[1]

            if input_value.title() in ("True", "False"):
                input_value = input_value.title() == "True"
            elif input_value.lstrip("-").isdigit():
                input_value = int(input_value)
            else:
                raise RuntimeError(f'invalid value ({input_value}) provided in {test_config_path}'
                                   f' on line {line_num} for option "{input_option}". Must be true, false or an integer.')

            test_config.update({input_option: input_value})

    return test_config


def pytest_generate_tests(metafunc):
    if "ballot_path" in metafunc.fixturenames:

        test_contest_set = glob.glob(f'{metafunc.config.rootpath}/tests/contest_sets/tabulation_test/*/input')
        test_contest_set_dirs = sorted(os.path.dirname(test_path) for test_path in test_contest_set)

        metafunc.parametrize("ballot_path", test_contest_set_dirs)


@pytest.fixture
def test_config(ballot_path):
    test_config_path = os.path.normpath(f"{ballot_path}/input/test_config.txt")
    if not os.path.isfile(test_config_path):
        pytest.skip(f"no test_config.txt at {test_config_path}")
    return read_test_config(test_config_path)

