# scatter

`scatter` is the core of a small stack-based, concatenative language.
Programs push literals (strings, numbers, booleans and function addresses)
onto a stack and call words that pop their arguments and push their results.

The package provides:

- **Types and arities** (`scatter.datatype`, `scatter.arity`): every word has
  an arity describing what it pops and what it pushes. Arities compose
  serially (`Arity.serial`, one word after another) and in parallel
  (`Arity.parallel`, alternative branches).
- **Static analysis** (`scatter.analyze`): `analyze_program` infers the arity
  of every function in a program; `analyze_block_in_namespace` infers the
  arity of a single block.
- **An interpreter** (`scatter.interpreter`): `Interpreter.execute` runs a
  block against a stack using the built-in words of `scatter.intrinsics`.
- **Syntax tree and lexical pieces** (`scatter.ast`, `scatter.token`,
  `scatter.symbol`, `scatter.source_location`): terms, branches, loops,
  functions, imports, tokens, symbols and source positions.
- **Runtime values** (`scatter.value`): `Address`, `is_truthy`,
  `display_value` and `debug_value`.
- **Code generation helpers** (`scatter.codegen`): `CodegenTarget`, an
  indenting text buffer, and `CodegenContext`, which turns names into
  identifier-safe ones.
- **Checked conversions** (`scatter.convert`).

## Arity notation

An arity is written as the popped types (top of stack rightmost), a dash,
and the pushed types. Types are `n` (number), `s` (string), `b` (bool),
`a` (address) and `u` (unknown). A pushed value that depends on a popped one
is written as the index of that pop, with alternatives separated by `|`.

```python
from scatter.arity import Arity
from scatter.datatype import Type

add = Arity.parse("n n - n")
print(add.stringify())          # n n - n

lit = Arity.literal(Type.NUMBER)
print(Arity.serial(lit, Arity.number_unary()).stringify())   # - n

print(Type.BOOL.union(Type.NUMBER))    # Type.UNKNOWN
print(Type.BOOL.inter(Type.UNKNOWN))   # Type.BOOL
```

Combining arities that cannot be reconciled raises a subclass of
`scatter.errors.ArityCombineError`: `DifferingSizesError` or
`IncompatibleTypesError`.

## Running and analysing a block

The interpreter and the analyser work on any program object that has a
`namespaces` list (each entry with a `functions` mapping from name to an
`scatter.ast.Function`) and a `resolve_function(namespace, name)` method
returning a `(namespace, name)` pair or `None`.

```python
from scatter.analyze import analyze_block_in_namespace
from scatter.ast import Block, NameTerm, term
from scatter.interpreter import Interpreter


class EmptyProgram:
    namespaces = []

    def resolve_function(self, namespace, name):
        return None


program = EmptyProgram()
block = Block([term(20), term(22), NameTerm("+")])

print(Interpreter(program).execute(0, block).stack)                # [42.0]
print(analyze_block_in_namespace([], 0, block, program).stringify())  # - n
```

`Interpreter` also takes an initial `stack`, an `input_stream` read by the
`readline` word and an `output_stream` written by the `print` word; they
default to standard input and output.

## Built-in words

```python
from scatter.intrinsics import get_intrinsic, get_intrinsic_arity, get_intrinsic_codegen_name

print(get_intrinsic("dup").name)             # dup
print(get_intrinsic_arity("+").stringify())  # n n - n
print(get_intrinsic_codegen_name("+"))       # plus
```

The words are `+ - * / % **`, `|| &&`, `swap dup over rot drop`, `print`,
`readline`, `substring`, `to_char`, `from_char`, `index`, `join`, `length`,
`assert`, `eval`, `> <`, `!`, `-- ++` and `==`.

`eval` calls a function address at run time, so its arity cannot be known
statically: `get_intrinsic_arity("eval")` raises
`scatter.errors.AnalysisError`.

## Numeric conversions

Each function in `scatter.convert` returns `None` when the value is out of
range:

```python
from scatter.convert import f64_to_usize, f64_to_char, hex_char_to_u8

f64_to_usize(3.0)    # 3
f64_to_usize(-1.0)   # None
f64_to_usize(2.5)    # None
f64_to_char(65.0)    # 'A'
hex_char_to_u8("f")  # 15
```

## Errors

Run-time failures (an empty stack, a value of the wrong type, a failed
`assert`, an unknown function name) raise `scatter.errors.InterpreterError`,
which carries `message` and a `backtrace` of `(namespace, term)` pairs for
the calls that led to it. Analysis problems raise
`scatter.errors.AnalysisError`, whose `kind` is an `AnalysisErrorKind`, and
code generation problems raise `scatter.errors.CodegenError`.

## What this package does not do

- It has no tokenizer or parser: syntax trees are built directly from the
  classes in `scatter.ast`.
- It has no program or namespace structure of its own and does not load or
  resolve imports from files; you supply the program object described above.
- It does not emit code for any target language; `scatter.codegen` holds only
  the shared output buffer and name resolution.
- It has no command-line tool or interactive prompt.