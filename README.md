# jcontainers

A small library for managing the lifetime of shared collection objects, with a
few supporting tools:

- **Object lifetime**: `jcontainers.objects.ObjectBase` keeps four reference
  counts: owner objects, script users, the stack, and the autorelease queue.
  When an object has no owners left, `jcontainers.aqueue.AutoreleaseQueue`
  keeps it alive for a short time and then releases it.
- **Registry and identifiers**: `jcontainers.registry.ObjectRegistry` gives out
  public handles from `jcontainers.id_generator.IdGenerator`. The generator
  takes freed identifiers back so that it can hand them out again.
- **Garbage collection**: `jcontainers.garbage_collector.collect` finds objects
  that no user-retained or queued object can reach. It deletes them, or clears
  them if they are part of a cycle.
- **Context**: `jcontainers.context.ObjectContext` owns a registry and a queue.
  It can collect garbage, clear all of its state and run the steps needed
  after loading.
- **Reflection**: `jcontainers.reflection` describes script classes and the
  functions they expose, using `ClassInfo`, `FunctionInfo` and `ClassRegistry`.
  Class and function names are compared without regard to case.
- **JSON validator**: checks single JSON files or whole directory trees, and
  rejects duplicate object keys.

## Installation

```
pip install .
```

To install pytest as well, add the `test` extra:

```
pip install .[test]
```

## Validating JSON files

```
jc-json-validator config.json data/
```

Each argument can be a file or a directory. Directories are searched
recursively, and paths that do not exist are skipped.

For every file that fails, the command prints:

- the path;
- the line and column;
- the error message;
- a hint to save the file without a byte order mark, if the file starts with
  a UTF-8 BOM.

At the end it prints how many errors it found and how many files it checked.
If you give no arguments, it prints a short description instead. It then
prints "press any key to close" and, when run from a terminal, waits for
Enter.

From Python:

```python
from jcontainers.validator import validate_paths

report = validate_paths(["data/"])
for failure in report.failures:
    print(failure.format())
print(report.summary())
```

## Object lifetime

Subclasses of `ObjectBase` must implement `clear`, `count` and
`nullify_objects`:

```python
from jcontainers.context import ObjectContext
from jcontainers.objects import ObjectBase

class Box(ObjectBase):
    def clear(self): pass
    def count(self): return 0
    def nullify_objects(self): pass

ctx = ObjectContext(autostart=False)   # no background timer; tick by hand
box = Box()
box.set_context(ctx)
box.register_self()

handle = box.uid()            # public handle; the unowned object is queued
assert ctx.get_object(handle) is box

for _ in range(5):
    ctx.aqueue.tick()         # its lifetime expires, so it is deleted
assert ctx.get_object(handle) is None
```

With `autostart=True`, which is the default, the queue ticks on a background
timer every two seconds.

## Identifier generation

```python
from jcontainers.id_generator import IdGenerator

gen = IdGenerator()
a = gen.new_id()
gen.reuse_id(a)
assert gen.is_free_id(a)
```

## Time arithmetic for the autorelease queue

The queue counts time in 32-bit ticks that wrap around:

```python
from jcontainers.aqueue import time_add, time_subtract

time_subtract(0, 1)       # 0xFFFFFFFE
time_add(0xFFFFFFFF, 1)   # 1
```

## Class descriptions

```python
from jcontainers.reflection import ClassInfo, ClassRegistry, FunctionInfo

registry = ClassRegistry()

@registry.register
def my_class():
    info = ClassInfo("MyClass")
    info.add_function(FunctionInfo("sum"))
    return info

assert registry.find_function_of_class("SUM", "myclass") is not None
```

## What this package does not do

- It does not generate script source files from class descriptions.
- It does not bind Python functions to script functions.
- It does not save or load the object graph. `ObjectContext.post_load_initializations`
  and `post_load_maintenance` are meant to be called after you have restored
  the objects into the registry yourself.