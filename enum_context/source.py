"""
The build-time expansion: rewrite Python source so that every class decorated with
``string_context`` is spelled out with its context variant and routines.

This runs as a pre-build step when the generated code should be read, reviewed or type
checked rather than produced at import.
"""

from .attribute import interpret_node
from .errors import ErrorContext, ExpansionError, NameCollision, err_ctx
from .generate import generate
from .helpers import MODULE_ALIAS, SOURCE, trace, visibility_of
from .inject import inject
from .model import ErrorEnumDefinition, VariantDecl

import ast

DECORATOR = "string_context"
HEADER = "# Generated by enum_context from {}. Do not edit.\n"


def is_string_context(node):
    "Check if a decorator expression is ``string_context``, bare, called or qualified."
    target = node.func if isinstance(node, ast.Call) else node
    if isinstance(target, ast.Name):
        return target.id == DECORATOR
    if isinstance(target, ast.Attribute):
        return target.attr == DECORATOR
    return False


def _target_names(target):
    if isinstance(target, ast.Name):
        yield target.id
    elif isinstance(target, (ast.Tuple, ast.List)):
        for elt in target.elts:
            yield from _target_names(elt)
    elif isinstance(target, ast.Starred):
        yield from _target_names(target.value)


def _bound_names(stmt):
    if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
        yield stmt.name
    elif isinstance(stmt, ast.Assign):
        for target in stmt.targets:
            yield from _target_names(target)
    elif isinstance(stmt, (ast.AnnAssign, ast.AugAssign)):
        yield from _target_names(stmt.target)
    elif isinstance(stmt, (ast.Import, ast.ImportFrom)):
        for alias in stmt.names:
            yield alias.asname or alias.name.split(".")[0]


def _constant(node):
    return node.value if isinstance(node, ast.Constant) else None


def variant_from_node(stmt):
    """
    Recognize ``Name = variant("message", "field", ..., source=..., from_=...)``.

    Returns a VariantDecl or None. Values that aren't literals are left unknown.
    """
    if not (
        isinstance(stmt, ast.Assign)
        and len(stmt.targets) == 1
        and isinstance(stmt.targets[0], ast.Name)
        and isinstance(stmt.value, ast.Call)
    ):
        return None
    call = stmt.value
    func = call.func
    if not (
        isinstance(func, ast.Name)
        and func.id == "variant"
        or isinstance(func, ast.Attribute)
        and func.attr == "variant"
    ):
        return None

    values = [_constant(arg) for arg in call.args]
    message = values[0] if values and isinstance(values[0], str) else None
    fields = tuple(value for value in values[1:] if isinstance(value, str))
    source = None
    for keyword in call.keywords:
        if keyword.arg == "source":
            source = _constant(keyword.value)
        elif keyword.arg == "from_" and source is None and len(fields) == 1:
            source = fields[0]
    if isinstance(source, int) and 0 <= source < len(fields):
        source = fields[source]
    if source not in fields:
        source = None
    return VariantDecl(name=stmt.targets[0].id, message=message, fields=fields, source=source)


def definition_from_node(node):
    "Describe an error enum from its class statement."
    variants = []
    members = set()
    for stmt in node.body:
        members.update(_bound_names(stmt))
        decl = variant_from_node(stmt)
        if decl is not None:
            variants.append(decl)
    attributes = [ast.unparse(dec) for dec in node.decorator_list if not is_string_context(dec)]
    attributes.extend(ast.unparse(base) for base in node.bases)
    return ErrorEnumDefinition(
        name=node.name,
        visibility=visibility_of(node.name),
        attributes=attributes,
        variants=variants,
        members=members,
    )


def emit_source(node, artifacts, module=MODULE_ALIAS):
    "Splice the context variant and the routines into the class, leaving the import-time check."
    added = artifacts.variant
    lines = [
        "__context_variant__ = {!r}".format(added.name),
        "{} = {}.variant({!r}, {}, source={!r})".format(
            added.name, module, added.message, ", ".join(map(repr, added.fields)), added.source
        ),
    ]
    lines.extend(text for _, text in artifacts.routines)

    guard = ast.parse("{}.expanded".format(module), mode="eval").body
    node.decorator_list = [
        guard if is_string_context(dec) else dec for dec in node.decorator_list
    ]
    for text in lines:
        node.body.extend(ast.parse(text).body)
    return node


def expand_node(node, module=MODULE_ALIAS):
    "Expand one decorated class statement in place."
    decorators = [dec for dec in node.decorator_list if is_string_context(dec)]
    with ErrorContext("<", node.name, ">"):
        if len(decorators) > 1:
            raise NameCollision("string_context is applied {} times".format(len(decorators)))
        if not node.bases:
            raise ExpansionError(
                "string_context can only be applied to an ErrorEnum subclass, "
                "{} has no bases".format(node.name)
            )
        trace("expand_node({}): start", node.name)
        attribute = interpret_node(decorators[0])
        definition = definition_from_node(node)
        augmented, added = inject(definition, attribute.template, attribute.variant_name)
        artifacts = generate(SOURCE, augmented, added, attribute.template, module=module)
    emit_source(node, artifacts, module=module)
    return artifacts


def _insert_import(tree, module):
    for stmt in tree.body:
        if isinstance(stmt, ast.Import) and any(alias.asname == module for alias in stmt.names):
            return
    index = 0
    body = tree.body
    if body and isinstance(body[0], ast.Expr) and isinstance(_constant(body[0].value), str):
        index = 1
    while (
        index < len(body)
        and isinstance(body[index], ast.ImportFrom)
        and body[index].module == "__future__"
    ):
        index += 1
    body.insert(index, ast.parse("import enum_context as {}".format(module)).body[0])


def expand_source(text, filename="<string>", module=MODULE_ALIAS):
    """
    Expand every ``string_context`` class in a module's source and return the new source.

    Source without decorated classes is returned unchanged. If any class fails to expand,
    the error propagates and nothing is returned.
    """
    tree = ast.parse(text, filename=filename)
    targets = [
        node
        for node in ast.walk(tree)
        if isinstance(node, ast.ClassDef) and any(map(is_string_context, node.decorator_list))
    ]
    trace("expand_source({}): {} classes", filename, len(targets))
    if not targets:
        return text
    for node in targets:
        location = "{}:{}: ".format(filename, node.lineno)
        err_ctx(location, lambda: expand_node(node, module=module))
    _insert_import(tree, module)
    return HEADER.format(filename) + ast.unparse(tree) + "\n"


def expand_file(path, output=None, encoding="utf-8"):
    """
    Expand a source file. Writes the result to ``output`` if given, and returns it.
    """
    with open(path, encoding=encoding) as handle:
        text = handle.read()
    result = expand_source(text, filename=str(path))
    if output is not None:
        with open(output, "w", encoding=encoding) as handle:
            handle.write(result)
    return result
