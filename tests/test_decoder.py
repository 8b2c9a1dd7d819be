# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import math
import sys
import unittest

from minser.decoder import Loaded, load
from minser.encoder import dump
from minser.exception import (
    CompileError,
    EvaluationError,
    EvaluationTimeoutError,
    OutOfStepsError,
    ReaderError,
)
from minser.sandbox import DISABLED_CONFIG, HostEvaluator, SandboxConfig
from minser.utils.result import Err, Ok


def spin():
    n = 0
    while True:
        n += 1


def swallow_everything():
    try:
        spin()
    except BaseException:
        return 'caught'


def swallow_exceptions():
    try:
        spin()
    except Exception:
        return 'caught'


def fail_quietly():
    raise ValueError()


def point(x, y):
    return {'x': x, 'y': y}


# 1000 * 1000 iterations, way over the default step limit
NESTED_LOOP = '[0 for a in [0] * 1000 for b in [0] * 1000]'


class DecoderTest(unittest.TestCase):
    def test_round_trip(self) -> None:
        values = [
            None, True, False, 0, -7, 2**70, 1.5, 1e-300,
            '', 'text', 'quote " and \\', 'line\nbreak\r\n', '\x00\x1f\x7f', 'ünïcode ☃',
            [1, 2, 3], ['nested', [1, [2]]],
            {'a': 1, 'b': [1, 2], 'c': {'d': 'e'}},
            {1: 'x', 'k': 'y'},
            {True: 1, 2.5: 'f', 'end': 'reserved', 'with space': 0},
            {'__class__': 'key', '_private': 1},
        ]
        for value in values:
            with self.subTest(value=value):
                text = dump(value).unwrap()
                self.assertEqual(load(text), Ok(Loaded(1, (value,))))

    def test_round_trip_huge_int(self) -> None:
        value = 10**5000
        for i, encoded in enumerate((value, -value, [value], {value: value})):
            # compared without assertEqual, the repr of a failure would hit the int conversion limit
            with self.subTest(i=i):
                self.assertTrue(load(dump(encoded).unwrap()).unwrap().values == (encoded,))

    def test_round_trip_lone_surrogates(self) -> None:
        for value in ('\ud800', 'a\udfffb', ['\udbff'], {'\udc00': '\ud83d'}):
            with self.subTest(value=ascii(value)):
                text = dump(value).unwrap()
                text.encode('utf-8')
                self.assertEqual(load(text), Ok(Loaded(1, (value,))))

    def test_round_trip_many_values(self) -> None:
        values = (1, 'two', [3], {'four': 4})
        self.assertEqual(load(dump(*values).unwrap()), Ok(Loaded(4, values)))

    def test_round_trip_special_floats(self) -> None:
        loaded = load(dump(math.inf, -math.inf, math.nan).unwrap()).unwrap()
        self.assertEqual(loaded.count, 3)
        self.assertEqual(loaded.values[:2], (math.inf, -math.inf))
        self.assertTrue(math.isnan(loaded.values[2]))

    def test_sequence_with_holes(self) -> None:
        text = dump([42, 'Hello!', None, 'blah']).unwrap()
        self.assertEqual(load(text).unwrap().values, ({1: 42, 2: 'Hello!', 4: 'blah'},))

    def test_blank_text(self) -> None:
        self.assertEqual(load(''), Ok(Loaded(0, ())))
        self.assertEqual(load('  \n  '), Ok(Loaded(0, ())))

    def test_composites(self) -> None:
        loaded = load('{1,2,3}, {}, {x=1}, {1, 2, x=3}, {x=1, 5}').unwrap()
        self.assertEqual(loaded.values, ([1, 2, 3], {}, {'x': 1}, {1: 1, 2: 2, 'x': 3}, {'x': 1, 1: 5}))

    def test_later_field_wins(self) -> None:
        self.assertEqual(load('{a=1, a=2}').unwrap().values, ({'a': 2},))
        self.assertEqual(load('{[1]=5, 6}').unwrap().values, ({1: 6},))

    def test_escaped_strings(self) -> None:
        self.assertEqual(load('"a\\nb\\r", "\\x00"').unwrap().values, ('a\nb\r', '\x00'))

    def test_reader_error(self) -> None:
        result = load('{1,')
        self.assertTrue(result.is_err())
        self.assertIsInstance(result.unwrap_err(), ReaderError)

    def test_compile_error(self) -> None:
        for text in ('1 +', '{=1}', 'a b'):
            with self.subTest(text=text):
                result = load(text)
                self.assertTrue(result.is_err())
                self.assertIsInstance(result.unwrap_err(), CompileError)

    def test_compile_error_runs_nothing(self) -> None:
        calls = []
        result = load('record(), )', {'record': lambda: calls.append(1)})
        self.assertIsInstance(result.unwrap_err(), CompileError)
        self.assertEqual(calls, [])

    def test_missing_name(self) -> None:
        self.assertEqual(load('foo'), Err(EvaluationError("name 'foo' is not defined")))

    def test_builtins_are_not_reachable(self) -> None:
        for text in ('len("x")', 'open("/etc/passwd")', 'print(1)'):
            with self.subTest(text=text):
                result = load(text)
                self.assertTrue(result.is_err())
                self.assertIsInstance(result.unwrap_err(), EvaluationError)

    def test_internals_are_not_reachable_through_attributes(self) -> None:
        calls = []
        env = {'record': lambda: calls.append(1)}
        texts = (
            '[c for c in ().__class__.__base__.__subclasses__() if c.__name__ == "_wrap_close"][0]'
            '.__init__.__globals__["system"]("echo unreachable")',
            'record(), "".__class__.__mro__',
            'record(), (lambda: 0).__globals__',
            'record(), (a for a in [1]).gi_frame.f_back',
            'record(), "{0.__class__}".format(1)',
            'record(), __import__("os")',
        )
        for text in texts:
            with self.subTest(text=text):
                result = load(text, env)
                self.assertTrue(result.is_err())
                self.assertIsInstance(result.unwrap_err(), CompileError)
        self.assertEqual(calls, [])

    def test_supplied_builtins(self) -> None:
        self.assertEqual(load('len("abc")', {'__builtins__': {'len': len}}), Ok(Loaded(1, (3,))))

    def test_environment(self) -> None:
        env = {'point': point, 'origin': 0}
        self.assertEqual(load('point(origin, 2)', env).unwrap().values, ({'x': 0, 'y': 2},))
        self.assertEqual(env, {'point': point, 'origin': 0})

    def test_environment_is_copied(self) -> None:
        env = {'data': [1]}
        self.assertEqual(load('data', env).unwrap().values, ([1],))
        self.assertNotIn('__builtins__', env)

    def test_fault_message(self) -> None:
        self.assertEqual(load('1 / 0'), Err(EvaluationError('division by zero')))

    def test_fault_without_message(self) -> None:
        self.assertEqual(load('fail()', {'fail': fail_quietly}), Err(EvaluationError('ValueError')))

    def test_timeout(self) -> None:
        self.assertEqual(load('spin()', {'spin': spin}), Err(EvaluationTimeoutError()))

    def test_timeout_in_pure_expression(self) -> None:
        self.assertEqual(load(NESTED_LOOP), Err(EvaluationTimeoutError()))

    def test_timeout_counting_lines(self) -> None:
        config = SandboxConfig(count_opcodes=False)
        self.assertEqual(load('spin()', {'spin': spin}, config=config), Err(EvaluationTimeoutError()))

    def test_timeout_cannot_be_swallowed(self) -> None:
        env = {'swallow_everything': swallow_everything, 'swallow_exceptions': swallow_exceptions}
        self.assertEqual(load('swallow_exceptions()', env), Err(EvaluationTimeoutError()))
        self.assertEqual(load('swallow_everything()', env), Err(EvaluationTimeoutError()))

    def test_out_of_steps_is_not_an_exception(self) -> None:
        self.assertFalse(issubclass(OutOfStepsError, Exception))

    def test_zero_steps(self) -> None:
        self.assertEqual(load('{1,2,3}', config=SandboxConfig(max_steps=0)), Err(EvaluationTimeoutError()))

    def test_disabled_watchdog(self) -> None:
        text = '[0 for a in [0] * 200 for b in [0] * 200]'
        self.assertEqual(load(text), Err(EvaluationTimeoutError()))
        loaded = load(text, config=DISABLED_CONFIG).unwrap()
        self.assertEqual(loaded.count, 1)
        self.assertEqual(len(loaded.values[0]), 40_000)

    def test_custom_evaluator(self) -> None:
        evaluator = HostEvaluator(SandboxConfig(max_steps=0))
        self.assertEqual(load('1', evaluator=evaluator), Err(EvaluationTimeoutError()))
        # config is ignored when an evaluator is given
        self.assertEqual(load('1', config=DISABLED_CONFIG, evaluator=evaluator), Err(EvaluationTimeoutError()))

    def test_trace_function_is_restored(self) -> None:
        events = []

        def tracer(frame, event, arg):
            events.append(event)
            return None

        previous = sys.gettrace()
        sys.settrace(tracer)
        try:
            load('spin()', {'spin': spin})
            load('1')
            load('foo')
            self.assertIs(sys.gettrace(), tracer)
        finally:
            sys.settrace(previous)
        self.assertIs(sys.gettrace(), previous)
