# pipetoolkit

A collection of small, dependency-free utilities for service code:

- `pipetoolkit.strutil`: URL encoding and decoding, timestamp formatting and parsing,
  string splitting and prefix checks.
- `pipetoolkit.b64`: base64 encoding and a lenient base64 decoder.
- `pipetoolkit.localtime`: a lock-free local time breakdown (`no_locks_localtime`),
  driven by timezone information captured once with `local_time_init`.
- `pipetoolkit.fileutil`: directory creation, recursive deletion, directory scanning,
  path normalisation (`absolute_path`, `parent_dir`) and file loading and saving.
- `pipetoolkit.notice`: a process-wide event hub (`NoticeCenter`) where listeners
  register per tag and event name.
- `pipetoolkit.jsonvalue` and `pipetoolkit.jsonparse`: an immutable JSON value type
  (`Json`) with a strict parser, an optional comment-tolerant mode and multi-document
  parsing.
- `pipetoolkit.logchannels`: log records (`LogContext`) and the channels that write
  them: `ConsoleChannel`, `EventChannel`, `SysLogChannel`, `FileChannelBase` and the
  daily-rotating `FileChannel`.

## Installation

```
pip install pipetoolkit
```

To run the tests:

```
pip install "pipetoolkit[test]"
pytest
```

## Examples

```python
from pipetoolkit.strutil import url_encode, url_decode, split
from pipetoolkit.b64 import encode_base64, decode_base64

url_encode("a b&c")           # 'a+b%26c'
url_decode("a+b%26c")         # 'a b&c'
split("a,,b,c", ",")          # ['a', 'b', 'c']

encode_base64(b"abc:def")     # 'YWJjOmRlZg=='
decode_base64("YWJjOmRlZg==") # b'abc:def'
```

`decode_base64` stops at the first `=`, so padding is optional; a character outside
the base64 alphabet raises `ValueError`.

JSON values:

```python
from pipetoolkit.jsonparse import parse, parse_multi, ParseStrategy
from pipetoolkit.jsonvalue import Json, JsonType

doc = parse('{"name": "cam1", "fps": 25} // trailing note', ParseStrategy.COMMENTS)
doc["fps"].int_value()        # 25
doc["missing"].is_null()      # True
doc.has_shape([("name", JsonType.STRING)])  # True
print(Json([1, 2.5, "x"]).dump())           # [1,2.5,"x"]

result = parse_multi('{"a": 1} [2] oops')
result.values                 # the two values read before the error
result.error                  # message describing the failure
```

`parse` raises `JsonParseError` (a `ValueError`) on malformed input.

Events:

```python
from pipetoolkit.notice import NoticeCenter, InterruptEmit

center = NoticeCenter.instance()
tag = object()
center.add_listener(tag, "frame", lambda idx: print("frame", idx))
center.emit_event("frame", 1)       # returns the number of listeners called
center.del_listener(tag, "frame")
```

A listener may raise `InterruptEmit` to stop the remaining listeners of that event.
`emit_event_safe` checks first that every listener can take the given arguments and
raises `TypeError` before any of them runs if one cannot.

Log channels:

```python
from types import SimpleNamespace
from pipetoolkit.logchannels import ConsoleChannel, FileChannel, LogContext, LogLevel

source = SimpleNamespace(name="app")   # channels only read a `name` attribute
ctx = LogContext(LogLevel.INFO, file=__file__, function="main", line=10)
ctx.append("started with ", 4, " workers")

ConsoleChannel("console", LogLevel.DEBUG).write(source, ctx)

with FileChannel("file", "logs/") as files:
    files.write(source, ctx)
```

`FileChannel` names its files `YYYY-MM-DD_NN.log`. A new file starts each day and
whenever the current one grows past the size limit (`set_file_max_size`, in MB).
Files older than the retention period (`set_max_day`) and files beyond the count
limit (`set_file_max_count`) are removed. `EventChannel` broadcasts each record on
a `NoticeCenter` as the event `EventChannel.BROADCAST_LOG_EVENT`, and
`SysLogChannel` sends it to the system log or to an `emit(priority, message)`
callable you supply.

## What this package does not do

There is no logger object in this package: nothing keeps a set of channels,
routes one record to all of them, folds repeated messages together, or writes in
a background thread. Records are built as `LogContext` values and handed to each
channel's `write` by the calling code. The package has no command-line tool.