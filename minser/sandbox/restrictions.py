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

"""
Syntax restrictions checked on the expression before it is compiled.

An empty `__builtins__` only hides names. Attributes still lead from any object to the interpreter internals, for
instance `().__class__.__base__.__subclasses__()`, and from there to module globals. Attributes that start with `__`
are rejected, whatever object they are read from, and so are the attributes that expose frames and code of
generators, coroutines and tracebacks.
"""

import ast

# these don't start with `__` but lead to frames, and frames lead to the globals of every caller
ATTRIBUTE_BLACKLIST: frozenset[str] = frozenset({
    'ag_await', 'ag_code', 'ag_frame',
    'cr_await', 'cr_code', 'cr_frame',
    'f_back', 'f_builtins', 'f_code', 'f_globals', 'f_locals',
    'gi_code', 'gi_frame', 'gi_yieldfrom',
    'tb_frame', 'tb_next',
    # format strings can read attributes too, `"{0.__class__}".format(x)`
    'format', 'format_map',
})


class _RestrictionsVisitor(ast.NodeVisitor):
    def visit_Attribute(self, node: ast.Attribute) -> None:
        if node.attr.startswith('__') or node.attr in ATTRIBUTE_BLACKLIST:
            raise SyntaxError(f'access to attribute {node.attr!r} is not allowed')
        self.generic_visit(node)

    def visit_Name(self, node: ast.Name) -> None:
        if node.id.startswith('__'):
            raise SyntaxError(f'usage of {node.id!r} is not allowed')
        self.generic_visit(node)


def verify_restrictions(tree: ast.AST) -> None:
    """Raise `SyntaxError` if the tree reads a forbidden attribute or name."""
    _RestrictionsVisitor().visit(tree)
