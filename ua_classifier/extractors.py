from collections.abc import Iterable, Sequence
from typing import ClassVar, Generic, Literal, TypeVar

from .compiler import Rule, compile_rule
from .errors import ConfigError
from .models import CPU, OS, Device, Engine, Product
from .templates import resolve

ProductParser = tuple[
    str,
    str | None,
    str | None,
    str | None,
    str | None,
]

OSParser = tuple[
    str,
    str | None,
    str | None,
    str | None,
    str | None,
    str | None,
]

DeviceParser = tuple[
    str,
    Literal["i"] | None,
    str | None,
    str | None,
    str | None,
]

CPUParser = tuple[
    str,
    Literal["i"] | None,
    str | None,
]

EngineParser = tuple[
    str,
    str | None,
    str | None,
    str | None,
    str | None,
    str | None,
]

T = TypeVar("T")


class Extractor(Generic[T]):
    """Ordered rules for one category, the first matching rule wins.

    Each rule is a tuple of the pattern, the regex flag (for categories which
    have one), then one template per field of ``result``.
    """

    name: ClassVar[str]
    result: ClassVar[type]
    # capture group used when a field's template is missing
    defaults: ClassVar[tuple[int | None, ...]]
    flagged: ClassVar[bool] = False

    def __init__(self, it: Iterable[Sequence[str | None]], /) -> None:
        self._rules = tuple(
            self._compile(parser, f"{self.name}[{i}]") for i, parser in enumerate(it)
        )

    def _compile(self, parser: Sequence[str | None], where: str) -> Rule:
        arity = 1 + self.flagged + len(self.defaults)
        if len(parser) != arity:
            raise ConfigError(f"{where}: expected {arity} items, got {len(parser)}")

        regex, *templates = parser
        if not isinstance(regex, str) or not regex:
            raise ConfigError(f"{where}: missing regex")
        flag = templates.pop(0) if self.flagged else None
        return compile_rule(regex, flag, templates, where=where)

    def __len__(self) -> int:
        return len(self._rules)

    def extract(self, s: str, /) -> T | None:
        for rule in self._rules:
            if (m := rule.match(s)) is not None:
                return self.result(
                    *(
                        resolve(template, m.groups, default)
                        for template, default in zip(rule.templates, self.defaults)
                    )
                )
        return None


class ProductExtractor(Extractor[Product]):
    name = "user_agent_parsers"
    result = Product
    defaults = (1, 2, 3, 4)

    def __init__(self, it: Iterable[ProductParser], /) -> None:
        super().__init__(it)


class OSExtractor(Extractor[OS]):
    name = "os_parsers"
    result = OS
    defaults = (1, 2, 3, 4, 5)

    def __init__(self, it: Iterable[OSParser], /) -> None:
        super().__init__(it)


class DeviceExtractor(Extractor[Device]):
    name = "device_parsers"
    result = Device
    # brand has no fallback, model defaults to the same group as the device
    defaults = (1, None, 1)
    flagged = True

    def __init__(self, it: Iterable[DeviceParser], /) -> None:
        super().__init__(it)


class CPUExtractor(Extractor[CPU]):
    name = "cpu_parsers"
    result = CPU
    defaults = (1,)
    flagged = True

    def __init__(self, it: Iterable[CPUParser], /) -> None:
        super().__init__(it)


class EngineExtractor(Extractor[Engine]):
    name = "engine_parsers"
    result = Engine
    defaults = (1, 2, 3, 4, 5)

    def __init__(self, it: Iterable[EngineParser], /) -> None:
        super().__init__(it)
