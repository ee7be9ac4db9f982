# ebmlkit

A pure-Python library for the building blocks of EBML, the binary format
underneath Matroska and WebM: variable-length integer coding, element
headers, a few typed value elements, the CRC-32 checksum element, and a
stream scanner that locates elements using semantic contexts.

It has no dependencies outside the standard library.

## Installing

```
pip install ebmlkit
```

To run the test suite:

```
pip install ebmlkit[test]
pytest
```

## Modules

- `ebmlkit.io` – stream callbacks. `IOCallback` is the abstract base with
  `read`, `write`, `set_file_pointer`, `get_file_pointer`, `close`,
  `read_fully` (raises `EOFError` on a short read) and `write_fully`
  (raises `OSError` on a short write); it is also a context manager.
  `MemReadIOCallback` reads from a block of bytes, `BytesIOCallback` is a
  growable in-memory read/write stream (`getvalue()` returns its content),
  and `StdIOCallback` works on a file opened with an `OpenMode`
  (`READ`, `WRITE`, `CREATE`, `SAFE`). Seeks take a `SeekMode`; reads of
  element data take a `ScopeMode`. File failures raise `CRTError`, which
  carries the `errno` value in `.error`.
- `ebmlkit.coding` – `EbmlId` (value plus coded length, with `from_bytes`
  and `to_bytes`) and the size coding helpers `coded_size_length`,
  `coded_value_length`, `read_coded_size_value` and their signed variants
  `coded_size_length_signed`, `coded_value_length_signed`,
  `read_coded_size_signed_value`.
- `ebmlkit.element` – the abstract `EbmlElement` base class and
  `EbmlCallbacks`, which describes an element class (factory, id, name and
  context). Elements can be rendered (`render`, `render_head`), measured
  (`element_size`, `head_size`, `end_position`) and rewritten in place
  (`overwrite_head`, `overwrite_data`).
- `ebmlkit.semantic` – `EbmlSemantic` (an element class with its
  mandatory and unique flags) and `EbmlSemanticContext`, the table of
  elements allowed at one level with links to the parent level, the global
  context and the owning element.
- `ebmlkit.contexts` – `get_global_context()`, the context of elements
  allowed at every level (the CRC-32 element), and `empty_global_context()`.
- `ebmlkit.parsing` – `find_next_element`, `find_next_id`,
  `create_element_using_context` and `skip_data`. Identifiers that are not
  known in the context become `EbmlDummy` elements when dummies are allowed.
- `ebmlkit.values` – `EbmlBinary` (opaque bytes), `EbmlDate` (seconds since
  the UNIX epoch, stored as nanoseconds since 2001-01-01 UTC) and
  `EbmlFloat` (4 or 8 bytes, chosen with `FloatPrecision`).
- `ebmlkit.crc32` – `EbmlCrc32`, the checksum element, with a running
  checksum (`update`, `finalize`, `fill_crc32`) and `check_crc`.

## Example: variable-length sizes

```python
from ebmlkit.coding import coded_size_length, coded_value_length, read_coded_size_value

n = coded_size_length(500, 0, True)   # 2 bytes are enough
raw = coded_value_length(500, n)
value, used, unknown = read_coded_size_value(raw)
assert value == 500 and used == n
```

## Example: writing and reading an element

Concrete element types get their identity from a `class_infos` attribute:

```python
from ebmlkit.coding import EbmlId
from ebmlkit.contexts import get_global_context
from ebmlkit.element import EbmlCallbacks
from ebmlkit.io import BytesIOCallback, MemReadIOCallback
from ebmlkit.parsing import find_next_element
from ebmlkit.semantic import EbmlSemantic, EbmlSemanticContext
from ebmlkit.values import EbmlFloat, FloatPrecision


class Duration(EbmlFloat):
    pass


Duration.class_infos = EbmlCallbacks(Duration, EbmlId(0x4489, 2), "Duration")

duration = Duration(precision=FloatPrecision.FLOAT_64)
duration.value = 1234.5

out = BytesIOCallback()
duration.render(out)
data = out.getvalue()          # b"\x44\x89\x88" followed by 8 bytes of data

context = EbmlSemanticContext(
    items=(EbmlSemantic(False, False, Duration.class_infos),),
    get_global=get_global_context,
)
stream = MemReadIOCallback(data)
element, level = find_next_element(stream, context)
element.read_data(stream)
assert element.value == 1234.5
```

## Example: checksums

```python
from ebmlkit.crc32 import EbmlCrc32

crc = EbmlCrc32()
crc.fill_crc32(b"123456789")
assert crc.crc32 == 0xCBF43926
assert EbmlCrc32.check_crc(crc.crc32, b"123456789")
```

## What is not included

The package has no container element type, so it cannot build or read
documents with nested children, and it has no checksum verification of a
container's content. Integer, string and Unicode string elements and the
Void padding element are not provided either; element types beyond
`EbmlBinary`, `EbmlDate`, `EbmlFloat`, `EbmlCrc32` and `EbmlDummy` have to be
written as `EbmlElement` subclasses. There is no command-line tool.