"""
Java source IR.

Generators describe a compilation unit as data (a JavaFile holding one
TypeDecl with its fields and methods) and call render() once at the end.
Method bodies are plain statement lines; nothing here escapes string literals.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set, Tuple

INDENT = "    "


def render_import_block(items: Iterable[str], package: Optional[str] = None) -> str:
    """Render Java import lines.

    Items may be fully qualified names or 'import ...' lines with or without
    the trailing semicolon. Output is normalized to 'import <FQN>;', sorted and
    deduplicated; java.lang and same-package imports are dropped.
    """
    out: Set[str] = set()
    for raw in items or ():
        s = re.sub(r"^\s*import\s+", "", str(raw or "").strip()).rstrip(";").strip()
        if not s:
            continue
        owner = s.rsplit(".", 1)[0] if "." in s else ""
        if owner == "java.lang" or (package and owner == package):
            continue
        out.add(f"import {s};")
    return ("\n".join(sorted(out)) + "\n") if out else ""


@dataclass
class Annotation:
    name: str
    members: List[Tuple[str, str]] = field(default_factory=list)

    def render(self) -> str:
        if not self.members:
            return f"@{self.name}"
        if len(self.members) == 1 and self.members[0][0] == "value":
            return f"@{self.name}({self.members[0][1]})"
        inner = ", ".join(f"{k} = {v}" for k, v in self.members)
        return f"@{self.name}({inner})"


@dataclass
class Param:
    type: str
    name: str
    annotations: List[Annotation] = field(default_factory=list)

    def render(self) -> str:
        parts = [a.render() for a in self.annotations] + [self.type, self.name]
        return " ".join(parts)


@dataclass
class FieldDecl:
    type: str
    name: str
    modifiers: List[str] = field(default_factory=lambda: ["private"])
    annotations: List[Annotation] = field(default_factory=list)
    initializer: Optional[str] = None

    def render_lines(self) -> List[str]:
        lines = [a.render() for a in self.annotations]
        decl = " ".join(self.modifiers + [self.type, self.name])
        if self.initializer is not None:
            decl += f" = {self.initializer}"
        lines.append(decl + ";")
        return lines


@dataclass
class Method:
    name: str
    returns: Optional[str] = "void"  # None renders a constructor
    params: List[Param] = field(default_factory=list)
    body: Optional[List[str]] = field(default_factory=list)  # None renders a declaration without body
    modifiers: List[str] = field(default_factory=lambda: ["public"])
    annotations: List[Annotation] = field(default_factory=list)
    javadoc: Optional[str] = None

    def render_lines(self) -> List[str]:
        lines = render_javadoc(self.javadoc)
        lines.extend(a.render() for a in self.annotations)
        head = list(self.modifiers)
        if self.returns is not None:
            head.append(self.returns)
        signature = " ".join(head + [self.name]) + "(" + ", ".join(p.render() for p in self.params) + ")"
        if self.body is None:
            lines.append(signature + ";")
            return lines
        lines.append(signature + " {")
        lines.extend((INDENT + line) if line else "" for line in self.body)
        lines.append("}")
        return lines


@dataclass
class TypeDecl:
    name: str
    kind: str = "class"
    modifiers: List[str] = field(default_factory=lambda: ["public"])
    annotations: List[Annotation] = field(default_factory=list)
    extends: Optional[str] = None
    implements: List[str] = field(default_factory=list)
    fields: List[FieldDecl] = field(default_factory=list)
    methods: List[Method] = field(default_factory=list)
    javadoc: Optional[str] = None

    def render_lines(self) -> List[str]:
        lines = render_javadoc(self.javadoc)
        lines.extend(a.render() for a in self.annotations)
        head = " ".join(self.modifiers + [self.kind, self.name])
        if self.extends:
            head += f" extends {self.extends}"
        if self.implements:
            head += " implements " + ", ".join(self.implements)
        lines.append(head + " {")
        members = [f.render_lines() for f in self.fields] + [m.render_lines() for m in self.methods]
        for member in members:
            lines.append("")
            lines.extend((INDENT + line) if line else "" for line in member)
        lines.append("}")
        return lines


@dataclass
class JavaFile:
    package: str
    type_decl: TypeDecl
    imports: Set[str] = field(default_factory=set)
    header: List[str] = field(default_factory=list)

    @property
    def file_name(self) -> str:
        return f"{self.type_decl.name}.java"

    @property
    def relative_path(self) -> str:
        return "/".join(self.package.split(".") + [self.file_name])

    def render(self) -> str:
        parts: List[str] = []
        if self.header:
            parts.append("\n".join(f"// {h}" if h else "//" for h in self.header) + "\n")
        parts.append(f"package {self.package};\n")
        block = render_import_block(self.imports, self.package)
        if block:
            parts.append(block)
        parts.append("\n".join(self.type_decl.render_lines()) + "\n")
        return "\n".join(parts)


def render_javadoc(text: Optional[str]) -> List[str]:
    if not text:
        return []
    lines = ["/**"]
    for line in text.strip("\n").splitlines():
        lines.append(f" * {line}".rstrip())
    lines.append(" */")
    return lines
