"""
Result tree produced by a parse.

One ParsedResult node exists per command level entered, linked root → child.
Each node owns exactly the keys declared by its command: options land on the
node of the command declaring them, positionals on the node of the command
they belong to.

While the walker binds, values are tagged:

- Switch(): a flag was present.
- Scalar(raw): a single raw string.
- Sequence(raw): every raw string of a multi field, in input order.

The validator replaces every tag with the final Python value (True/False, a
string, whatever the field's parse returned, a list, or the default) in a
fresh tree; the bound tree it reads is never modified.
"""
from types import MappingProxyType
from typing import NamedTuple


class Switch(NamedTuple):
    pass


class Scalar(NamedTuple):
    raw: str


class Sequence(NamedTuple):
    raw: list


class ParsedResult:
    """
    One command level of a parse result.

    Attributes
    - name: command name (the program name at the root).
    - depth: 0 at the root.
    - values: key → bound value for the fields this command declares.
    - child: the next level entered, or None at the deepest one.

    The views below (command_path, command, options, item access) are meant to
    be read on the root node; they look at this node and its descendants.
    """

    __slots__ = ("name", "depth", "values", "child")

    def __init__(self, name, /, depth=0, values=None, child=None):
        self.name = name
        self.depth = depth
        self.values = {} if values is None else values
        self.child = child

    def levels(self):
        """
        Yield this node and every descendant, shallowest first.
        """
        node = self
        while node is not None:
            yield node
            node = node.child

    @property
    def leaf(self):
        for node in self.levels():
            pass
        return node

    @property
    def command_path(self):
        return tuple(node.name for node in self.levels())

    @property
    def command(self):
        """
        Name of the deepest command entered.
        """
        return self.leaf.name

    @property
    def options(self):
        """
        Read-only merge of every level's values; deeper levels win on a clash.
        """
        merged = {}
        for node in self.levels():
            merged.update(node.values)
        return MappingProxyType(merged)

    def __getitem__(self, key):
        for node in reversed(tuple(self.levels())):
            if key in node.values:
                return node.values[key]
        raise KeyError(key)

    def __contains__(self, key):
        return any(key in node.values for node in self.levels())

    def get(self, key, default=None):
        try:
            return self[key]
        except KeyError:
            return default

    def as_dict(self):
        """
        Return the tree as nested plain dicts (name, values, child).
        """
        return {
            "name": self.name,
            "values": dict(self.values),
            "child": self.child.as_dict() if self.child is not None else None,
        }

    def __eq__(self, other):
        if not isinstance(other, ParsedResult):
            return NotImplemented
        return (self.name, self.depth, self.values, self.child) == (
            other.name, other.depth, other.values, other.child
        )

    __hash__ = None

    def __rich_repr__(self):
        yield "name", self.name
        yield "values", self.values
        if self.child is not None:
            yield "child", self.child

    def __repr__(self):
        return f"parsed-result({", ".join(f"{name}={object!r}" for name, object in self.__rich_repr__())})"


__all__ = (
    "Switch",
    "Scalar",
    "Sequence",
    "ParsedResult",
)
