# tinyvariant

A small, dependency-free library that models JSON-like values the way
memory-conscious embedded JSON libraries do, plus a tiny cooperative task
scheduler.

It provides three modules:

- `tinyvariant.variant`: `VariantData`, a single value slot that can hold
  null, a boolean, a 32- or 64-bit integer, a float or double, a short
  ("tiny") string, an owned string, a raw (pre-serialized) string, an array or
  an object. It also provides `VariantType`, `RawString`, `VariantDataVisitor`
  and `is_tiny_string`.
- `tinyvariant.reference`: `JsonVariant`, a reference to a `VariantData` with
  subscripting, `set`, `add`, `remove`, `to_array`/`to_object`, `as_`/`is_`
  conversions, the `|` fallback operator and comparison operators.
- `tinyvariant.tasker`: `AsyncTasker`, which runs delayed or repeating
  callbacks from a loop you drive yourself, without blocking.

## Installation

```
pip install tinyvariant
```

To run the test suite:

```
pip install "tinyvariant[test]"
pytest
```

## Storing values

```python
from tinyvariant.variant import VariantData, VariantType

data = VariantData()
data.set_integer(42)
assert data.type is VariantType.UINT32
assert data.as_float() == 42.0

data.set_string("hello")
assert data.is_string()
assert data.as_string() == "hello"
```

Integers go into the narrowest slot that holds them (`INT32`, `UINT32`,
`INT64`, `UINT64`); `set_integer` raises `OverflowError` beyond 64 bits.
Floats are kept in single precision (`FLOAT`) when that loses nothing, and in
`DOUBLE` otherwise. Strings of up to three bytes without NUL are stored as
`TINY_STRING`.

A null slot turns into an array or an object as soon as you add to it:

```python
data = VariantData()
data.add_value(1)
data.add_value("two")
assert data.size() == 2
assert data.get_element(1).as_string() == "two"
```

## Working through references

A `JsonVariant` made without data is unbound, and writes through it do
nothing; give it a `VariantData` to work on. Subscripting a reference does not
create anything until you write through it.

```python
from tinyvariant.reference import JsonVariant
from tinyvariant.variant import VariantData

doc = JsonVariant(VariantData())
doc["name"].set("sensor")
doc["readings"].to_array()
doc["readings"].add(21)
doc["readings"].add(22)

assert doc["readings"].size() == 2
assert doc["name"] == "sensor"
assert (doc["missing"] | 7) == 7
assert doc.nesting() == 2
assert doc["readings"].as_(list) == [21, 22]
```

`as_` and `is_` accept `bool`, `int`, `float`, `str`, `RawString`, `list`,
`dict` and `JsonVariant`; other types raise `TypeError`.

## Scheduling tasks

`schedule` returns the `ScheduledTask` it created. Its callback receives the
current time in milliseconds and the task itself, so it may change
`execution_time` or `repeat` while it runs. Call `run_event_loop` regularly,
for example from your main loop:

```python
from tinyvariant.tasker import AsyncTasker

tasker = AsyncTasker()
tasker.schedule(500, lambda now, task: print("tick", now), repeat=True)

while True:
    tasker.run_event_loop()
```

By default the tasker holds at most 20 tasks at once (pass `capacity` to
change that). Scheduling when every slot is taken raises `TaskQueueFull`.
One-shot tasks free their slot after they run. A `clock` callable returning
milliseconds can replace the default monotonic clock, which is handy in tests.

## What it does not do

The package holds and compares values in memory only: it does not parse JSON
text, serialize values back to JSON, or read and write files.