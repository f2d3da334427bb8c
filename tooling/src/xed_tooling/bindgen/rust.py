"""Render a pycparser AST as Rust FFI declarations.

Output follows rust-bindgen's conventions closely enough to be a drop-in for
include!(): raw C types from ::std::os::raw, #[repr(C)] records, enums as a
type alias plus one constant per enumerator, and a single extern "C" block.
"""

from __future__ import annotations

import ast
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from pycparser import c_ast

RAW = "::std::os::raw::"
C_VOID = f"{RAW}c_void"

KNOWN_TYPEDEFS: dict[str, str] = {
    "bool": "bool",
    "int8_t": "i8",
    "int16_t": "i16",
    "int32_t": "i32",
    "int64_t": "i64",
    "uint8_t": "u8",
    "uint16_t": "u16",
    "uint32_t": "u32",
    "uint64_t": "u64",
    "intptr_t": "isize",
    "uintptr_t": "usize",
    "ptrdiff_t": "isize",
    "size_t": "usize",
    "ssize_t": "isize",
}

BIT_WIDTHS: dict[str, int] = {
    "bool": 8,
    "i8": 8,
    "u8": 8,
    f"{RAW}c_char": 8,
    f"{RAW}c_schar": 8,
    f"{RAW}c_uchar": 8,
    "i16": 16,
    "u16": 16,
    f"{RAW}c_short": 16,
    f"{RAW}c_ushort": 16,
    "i32": 32,
    "u32": 32,
    f"{RAW}c_int": 32,
    f"{RAW}c_uint": 32,
    "i64": 64,
    "u64": 64,
    "isize": 64,
    "usize": 64,
    f"{RAW}c_long": 64,
    f"{RAW}c_ulong": 64,
    f"{RAW}c_longlong": 64,
    f"{RAW}c_ulonglong": 64,
}

UNSIGNED_STORAGE = {8: "u8", 16: "u16", 32: "u32", 64: "u64"}

UNSIGNED_TYPES: frozenset[str] = frozenset(
    {"bool", "u8", "u16", "u32", "u64", "usize"}
    | {f"{RAW}{t}" for t in ("c_uchar", "c_ushort", "c_uint", "c_ulong", "c_ulonglong")}
)

# LP64 data model, matching BIT_WIDTHS.
POINTER_SIZE = 8
_FLOAT_SIZES = {"f32": 4, "f64": 8, "u128": 16}
_ARRAY = re.compile(r"^\[(?P<elem>.+); (?P<len>\d+)usize\]$")

RUST_KEYWORDS: frozenset[str] = frozenset(
    "as async await box break const continue crate dyn else enum extern false fn for "
    "if impl in let loop match mod move mut pub ref return self Self static struct "
    "super trait true type union unsafe use where while abstract become do final "
    "macro override priv try typeof unsized virtual yield".split()
)

_C_SPECIFIERS = frozenset(
    {"void", "char", "short", "int", "long", "float", "double", "signed", "unsigned", "_Bool", "_Complex"}
)


class UnsupportedConstruct(ValueError):
    pass


def rust_ident(name: str) -> str:
    return f"{name}_" if name in RUST_KEYWORDS else name


def primitive(names: Iterable[str]) -> str:
    names = list(names)
    specifiers = set(names)
    unsigned = "unsigned" in specifiers
    longs = names.count("long")
    if "void" in specifiers:
        return C_VOID
    if "_Bool" in specifiers:
        return "bool"
    if "float" in specifiers:
        return "f32"
    if "double" in specifiers:
        # long double has no Rust equivalent; same opaque stand-in as bindgen.
        return "u128" if longs else "f64"
    if "char" in specifiers:
        if unsigned:
            return f"{RAW}c_uchar"
        return f"{RAW}c_schar" if "signed" in specifiers else f"{RAW}c_char"
    if "short" in specifiers:
        return f"{RAW}c_ushort" if unsigned else f"{RAW}c_short"
    if longs >= 2:
        return f"{RAW}c_ulonglong" if unsigned else f"{RAW}c_longlong"
    if longs == 1:
        return f"{RAW}c_ulong" if unsigned else f"{RAW}c_long"
    return f"{RAW}c_uint" if unsigned else f"{RAW}c_int"


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


_BINARY = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": _trunc_div,
    "%": lambda a, b: a - b * _trunc_div(a, b),
    "<<": lambda a, b: a << b,
    ">>": lambda a, b: a >> b,
    "&": lambda a, b: a & b,
    "|": lambda a, b: a | b,
    "^": lambda a, b: a ^ b,
    "&&": lambda a, b: int(bool(a) and bool(b)),
    "||": lambda a, b: int(bool(a) or bool(b)),
    "==": lambda a, b: int(a == b),
    "!=": lambda a, b: int(a != b),
    "<": lambda a, b: int(a < b),
    ">": lambda a, b: int(a > b),
    "<=": lambda a, b: int(a <= b),
    ">=": lambda a, b: int(a >= b),
}


def int_literal(text: str) -> int:
    """C integer literal (decimal, hex, octal, binary, with u/l suffixes) to int."""
    body = text.rstrip("uUlL")
    if body[:2] in ("0x", "0X"):
        return int(body, 16)
    if body[:2] in ("0b", "0B"):
        return int(body[2:], 2)
    if len(body) > 1 and body.startswith("0"):
        return int(body, 8)
    return int(body)


@dataclass
class _BitfieldUnit:
    bits: int
    used: int = 0
    members: list[str] = field(default_factory=list)


class RustEmitter:
    """Walk one translation unit and collect Rust items. Call render() once."""

    def __init__(self) -> None:
        self._items: list[str] = []
        self._externs: list[str] = []
        self._consts: list[str] = []
        self._types: set[str] = set()
        self._values: set[str] = set()
        self._aliases: dict[str, str] = {}
        self._constants: dict[str, int] = {}
        self._referenced: dict[str, str] = {}
        self._anon = 0
        self._nested: dict[str, int] = {}
        self._layouts: dict[str, tuple[int, int]] = {}

    # --- constants ---

    def add_macros(self, macros: Iterable[tuple[str, int]]) -> None:
        for name, value in macros:
            if name in self._values:
                continue
            if 0 <= value < 2**32:
                ty = "u32"
            elif -(2**31) <= value < 0:
                ty = "i32"
            elif 0 <= value < 2**64:
                ty = "u64"
            elif -(2**63) <= value < 0:
                ty = "i64"
            else:
                continue
            self._values.add(name)
            self._constants[name] = value
            self._consts.append(f"pub const {rust_ident(name)}: {ty} = {value};")

    def evaluate(self, node: c_ast.Node) -> int:
        if isinstance(node, c_ast.Constant):
            if node.type == "char":
                return ord(ast.literal_eval(node.value))
            if "int" in node.type or node.type in ("long", "unsigned"):
                return int_literal(node.value)
            raise UnsupportedConstruct(f"non-integer constant {node.value}")
        if isinstance(node, c_ast.ID):
            if node.name not in self._constants:
                raise UnsupportedConstruct(f"unknown constant {node.name}")
            return self._constants[node.name]
        if isinstance(node, c_ast.UnaryOp):
            if node.op in ("sizeof", "_Alignof"):
                if not isinstance(node.expr, c_ast.Typename):
                    raise UnsupportedConstruct(f"{node.op} of an expression")
                size, align = self.layout(self.rust_type(node.expr))
                return size if node.op == "sizeof" else align
            value = self.evaluate(node.expr)
            if node.op == "-":
                return -value
            if node.op == "+":
                return value
            if node.op == "~":
                return ~value
            if node.op == "!":
                return int(not value)
            raise UnsupportedConstruct(f"unary {node.op}")
        if isinstance(node, c_ast.BinaryOp):
            op = _BINARY.get(node.op)
            if op is None:
                raise UnsupportedConstruct(f"binary {node.op}")
            return op(self.evaluate(node.left), self.evaluate(node.right))
        if isinstance(node, c_ast.TernaryOp):
            if self.evaluate(node.cond):
                return self.evaluate(node.iftrue)
            return self.evaluate(node.iffalse)
        if isinstance(node, c_ast.Cast):
            return self.convert(self.evaluate(node.expr), self.rust_type(node.to_type))
        raise UnsupportedConstruct(type(node).__name__)

    def convert(self, value: int, rust_type: str) -> int:
        """Wrap value to the width and signedness of an integer type, as a C cast does."""
        rust_type = self.resolve(rust_type)
        if rust_type == "bool":
            return int(bool(value))
        bits = BIT_WIDTHS.get(rust_type)
        if bits is None:
            return value
        value &= (1 << bits) - 1
        if rust_type not in UNSIGNED_TYPES and value >= 1 << (bits - 1):
            value -= 1 << bits
        return value

    # --- layout ---

    def resolve(self, rust_type: str) -> str:
        seen: set[str] = set()
        while rust_type in self._aliases and rust_type not in seen:
            seen.add(rust_type)
            rust_type = self._aliases[rust_type]
        return rust_type

    def layout(self, rust_type: str) -> tuple[int, int]:
        """(size, align) in bytes of a rendered type. Opaque records have none."""
        rust_type = self.resolve(rust_type)
        if rust_type.startswith(("*", "::std::option::Option<")):
            return POINTER_SIZE, POINTER_SIZE
        m = _ARRAY.match(rust_type)
        if m:
            size, align = self.layout(m.group("elem"))
            return size * int(m.group("len")), align
        if rust_type in BIT_WIDTHS:
            n = BIT_WIDTHS[rust_type] // 8
            return n, n
        if rust_type in _FLOAT_SIZES:
            n = _FLOAT_SIZES[rust_type]
            return n, n
        if rust_type in self._layouts:
            return self._layouts[rust_type]
        raise UnsupportedConstruct(f"size of {rust_type}")

    # --- types ---

    def _anon_name(self) -> str:
        self._anon += 1
        return f"_bindgen_ty_{self._anon}"

    def _nested_name(self, parent: str) -> str:
        n = self._nested.get(parent, 0) + 1
        self._nested[parent] = n
        return f"{parent}__bindgen_ty_{n}"

    def _hint(self, node: c_ast.Node, parent: str) -> str | None:
        """Name for an anonymous struct/union/enum defined inside node, if there is one."""
        while isinstance(node, (c_ast.ArrayDecl, c_ast.PtrDecl)):
            node = node.type
        if not isinstance(node, c_ast.TypeDecl):
            return None
        inner = node.type
        if isinstance(inner, (c_ast.Struct, c_ast.Union)) and inner.name is None and inner.decls is not None:
            return self._nested_name(parent)
        if isinstance(inner, c_ast.Enum) and inner.name is None and inner.values is not None:
            return self._nested_name(parent)
        return None

    def _add_type(self, name: str, text: str) -> None:
        if name in self._types:
            return
        self._types.add(name)
        self._items.append(text)

    def _identifier(self, names: list[str]) -> str:
        if len(names) == 1 and names[0] in KNOWN_TYPEDEFS:
            return KNOWN_TYPEDEFS[names[0]]
        if len(names) == 1 and names[0] not in _C_SPECIFIERS:
            return rust_ident(names[0])
        return primitive(names)

    def _type_name(self, node: c_ast.Node, hint: str | None) -> str:
        if isinstance(node, c_ast.IdentifierType):
            return self._identifier(node.names)
        if isinstance(node, c_ast.Struct):
            return self._record("struct", node, hint)
        if isinstance(node, c_ast.Union):
            return self._record("union", node, hint)
        if isinstance(node, c_ast.Enum):
            return self._enum(node, hint)
        raise UnsupportedConstruct(type(node).__name__)

    def rust_type(self, node: c_ast.Node, hint: str | None = None) -> str:
        if isinstance(node, c_ast.TypeDecl):
            return self._type_name(node.type, hint)
        if isinstance(node, c_ast.PtrDecl):
            return self._pointer(node)
        if isinstance(node, c_ast.ArrayDecl):
            elem = self.rust_type(node.type, hint)
            size = 0 if node.dim is None else self.evaluate(node.dim)
            return f"[{elem}; {size}usize]"
        if isinstance(node, c_ast.FuncDecl):
            return f'unsafe extern "C" fn{self._signature(node)}'
        if isinstance(node, c_ast.Typename):
            return self.rust_type(node.type, hint)
        raise UnsupportedConstruct(type(node).__name__)

    def _pointer(self, node: c_ast.PtrDecl) -> str:
        target = node.type
        if isinstance(target, c_ast.FuncDecl):
            return f'::std::option::Option<unsafe extern "C" fn{self._signature(target)}>'
        mutability = "const" if "const" in (getattr(target, "quals", None) or []) else "mut"
        if _is_void(target):
            return f"*{mutability} {C_VOID}"
        return f"*{mutability} {self.rust_type(target)}"

    def _signature(self, func: c_ast.FuncDecl) -> str:
        params: list[str] = []
        params_in = func.args.params if func.args is not None else []
        for i, p in enumerate(params_in, start=1):
            if isinstance(p, c_ast.EllipsisParam):
                params.append("...")
                continue
            ptype = p.type
            if _is_void(ptype):
                continue
            if isinstance(ptype, c_ast.ArrayDecl):
                mutability = "const" if "const" in (getattr(ptype.type, "quals", None) or []) else "mut"
                ty = f"*{mutability} {self.rust_type(ptype.type)}"
            elif isinstance(ptype, c_ast.FuncDecl):
                ty = f'::std::option::Option<unsafe extern "C" fn{self._signature(ptype)}>'
            else:
                ty = self.rust_type(ptype)
            name = rust_ident(p.name) if p.name else f"arg{i}"
            params.append(f"{name}: {ty}")
        ret = "" if _is_void(func.type) else f" -> {self.rust_type(func.type)}"
        return f"({', '.join(params)}){ret}"

    def _record(self, kind: str, node: c_ast.Struct | c_ast.Union, hint: str | None) -> str:
        name = node.name or hint or self._anon_name()
        if node.decls is None:
            self._referenced.setdefault(name, kind)
            return rust_ident(name)
        if name in self._types:
            return rust_ident(name)
        self._types.add(name)
        fields: list[str] = []
        unit: _BitfieldUnit | None = None
        units = 0
        anon_members = 0
        members: list[tuple[int, int]] | None = []

        def measure(rust_type: str) -> None:
            nonlocal members
            if members is None:
                return
            try:
                members.append(self.layout(rust_type))
            except UnsupportedConstruct:
                members = None

        def flush() -> None:
            nonlocal unit, units
            if unit is None or not unit.members:
                unit = None
                return
            units += 1
            fields.append(f"    // {', '.join(unit.members)}")
            fields.append(f"    pub _bitfield_{units}: {UNSIGNED_STORAGE[unit.bits]},")
            measure(UNSIGNED_STORAGE[unit.bits])
            unit = None

        for d in node.decls:
            if d.bitsize is not None:
                width = self.evaluate(d.bitsize)
                bits = self.bit_width(self.rust_type(d.type))
                if unit is not None and (width == 0 or unit.bits != bits or unit.used + width > unit.bits):
                    flush()
                if width == 0:
                    continue
                if unit is None:
                    unit = _BitfieldUnit(bits=bits)
                unit.used += width
                unit.members.append(f"{d.name or '_'}: {width}")
                continue
            flush()
            if d.name is None and (isinstance(d.type, c_ast.Enum) or getattr(d.type, "name", None)):
                # nested type definition without a declarator: declares a type, adds no field
                self._type_name(d.type, self._nested_name(name))
                continue
            if d.name is None:
                # C11 anonymous struct/union member: the record itself, no declarator
                anon_members += 1
                fname = f"__bindgen_anon_{anon_members}"
                ftype = self._type_name(d.type, self._nested_name(name))
            else:
                fname = d.name
                ftype = self.rust_type(d.type, self._hint(d.type, name))
            fields.append(f"    pub {rust_ident(fname)}: {ftype},")
            measure(ftype)
        flush()
        if not fields:
            fields.append("    pub _address: u8,")
            measure("u8")
        if members is not None:
            self._layouts[rust_ident(name)] = record_layout(kind, members)
        body = "\n".join(fields)
        self._items.append(
            f"#[repr(C)]\n#[derive(Copy, Clone)]\npub {kind} {rust_ident(name)} {{\n{body}\n}}"
        )
        return rust_ident(name)

    def _enum(self, node: c_ast.Enum, hint: str | None) -> str:
        name = node.name or hint or self._anon_name()
        if node.values is None or name in self._types:
            if node.values is None:
                self._referenced.setdefault(name, "enum")
            return rust_ident(name)
        values: list[tuple[str, int]] = []
        nxt = 0
        for e in node.values.enumerators:
            value = self.evaluate(e.value) if e.value is not None else nxt
            self._constants[e.name] = value
            values.append((e.name, value))
            nxt = value + 1
        repr_ty = f"{RAW}c_int" if any(v < 0 for _, v in values) else f"{RAW}c_uint"
        self._add_type(name, f"pub type {rust_ident(name)} = {repr_ty};")
        self._aliases[rust_ident(name)] = repr_ty
        for ename, value in values:
            if ename in self._values:
                continue
            self._values.add(ename)
            self._items.append(f"pub const {rust_ident(ename)}: {rust_ident(name)} = {value};")
        return rust_ident(name)

    def bit_width(self, rust_name: str) -> int:
        return BIT_WIDTHS.get(self.resolve(rust_name), 32)

    # --- top level ---

    def _typedef(self, node: c_ast.Typedef) -> None:
        name = node.name
        if name in KNOWN_TYPEDEFS:
            return
        inner = node.type
        if (
            isinstance(inner, c_ast.TypeDecl)
            and isinstance(inner.type, (c_ast.Struct, c_ast.Union, c_ast.Enum))
            and inner.type.name is None
        ):
            self._type_name(inner.type, hint=name)
            return
        target = self.rust_type(inner, self._hint(inner, name))
        if target == rust_ident(name):
            return
        self._aliases[rust_ident(name)] = target
        self._add_type(name, f"pub type {rust_ident(name)} = {target};")

    def _decl(self, node: c_ast.Decl) -> None:
        storage = node.storage or []
        if "static" in storage:
            return
        if isinstance(node.type, c_ast.FuncDecl):
            if node.name in self._values:
                return
            self._values.add(node.name)
            self._externs.append(f"    pub fn {rust_ident(node.name)}{self._signature(node.type)};")
            return
        if node.name is None:
            # Bare struct/union/enum definition.
            self._type_name(node.type, hint=None)
            return
        ty = self.rust_type(node.type, self._hint(node.type, node.name))
        if node.name in self._values:
            return
        self._values.add(node.name)
        self._externs.append(f"    pub static mut {rust_ident(node.name)}: {ty};")

    def visit(self, tree: c_ast.FileAST) -> None:
        for ext in tree.ext:
            if isinstance(ext, c_ast.Typedef):
                self._typedef(ext)
            elif isinstance(ext, c_ast.Decl):
                self._decl(ext)
            # FuncDef (static inline bodies), pragmas and static asserts produce nothing.

    def render(self, source: str) -> str:
        for name, kind in self._referenced.items():
            if name in self._types:
                continue
            self._types.add(name)
            if kind == "enum":
                self._items.append(f"pub type {rust_ident(name)} = {RAW}c_uint;")
            else:
                self._items.append(
                    f"#[repr(C)]\n#[derive(Copy, Clone)]\npub {kind} {rust_ident(name)} {{\n"
                    "    _unused: [u8; 0],\n}"
                )
        parts = [f"/* automatically generated by xed-tooling from {source} */"]
        parts.extend(self._consts)
        parts.extend(self._items)
        if self._externs:
            parts.append('extern "C" {\n' + "\n".join(self._externs) + "\n}")
        return "\n\n".join(parts) + "\n"


def record_layout(kind: str, members: list[tuple[int, int]]) -> tuple[int, int]:
    """C layout of a struct or union from its members' (size, align), in declaration order."""
    align = max(a for _, a in members)
    if kind == "union":
        size = max(s for s, _ in members)
    else:
        size = 0
        for s, a in members:
            size = -(-size // a) * a + s
    return -(-size // align) * align, align


def _is_void(node: c_ast.Node) -> bool:
    return (
        isinstance(node, c_ast.TypeDecl)
        and isinstance(node.type, c_ast.IdentifierType)
        and node.type.names == ["void"]
    )


def emit_rust(
    tree: c_ast.FileAST,
    source: str,
    macros: Iterable[tuple[str, int]] = (),
) -> str:
    """Render tree (and integer macros scanned from the header) as a Rust source file."""
    emitter = RustEmitter()
    emitter.add_macros(macros)
    emitter.visit(tree)
    return emitter.render(source)
