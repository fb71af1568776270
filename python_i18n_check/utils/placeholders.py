"""
Placeholder parsing for message compatibility checks.
"""
import re
from dataclasses import dataclass
from string import Formatter
from typing import FrozenSet, Tuple

# printf style: %(name)s, %s, %5.2f, %% (the space flag is left out so "100% done" is not a placeholder)
PRINTF_FORMAT = re.compile(
    r'%(?:\((?P<name>[\w.]*)\))?[-#0+]*(?:\*|\d+)?(?:\.(?:\*|\d+))?[hlL]?(?P<conversion>[diouxXeEfFgGcrsa%])'
)


@dataclass(frozen=True)
class PlaceholderSignature:
    """The placeholders used by one message string."""
    named: FrozenSet[str] = frozenset()
    positional: Tuple[str, ...] = ()
    fields: Tuple[str, ...] = ()

    @property
    def mixes_named_and_positional(self) -> bool:
        return bool(self.named) and bool(self.positional)


def _brace_fields(text: str) -> Tuple[str, ...]:
    """Return sorted str.format() field names; malformed templates have none."""
    try:
        parsed = list(Formatter().parse(text))
    except ValueError:
        return ()
    names = []
    for _, field_name, _, _ in parsed:
        if field_name is None:
            continue
        # {0.attr} and {user[name]} both refer to their base field
        names.append(re.split(r'[.\[]', field_name, maxsplit=1)[0])
    return tuple(sorted(names))


def parse_placeholders(text: str) -> PlaceholderSignature:
    """Collect the printf and brace placeholders of text."""
    named = set()
    positional = []
    for match in PRINTF_FORMAT.finditer(text):
        conversion = match.group('conversion')
        if conversion == '%':
            continue
        if match.group('name') is not None:
            named.add(match.group('name'))
        else:
            positional.append(conversion)
    return PlaceholderSignature(frozenset(named), tuple(positional), _brace_fields(text))


def placeholders_match(source: str, translation: str) -> bool:
    """Check that a translation uses exactly the placeholders of its source."""
    return parse_placeholders(source) == parse_placeholders(translation)
