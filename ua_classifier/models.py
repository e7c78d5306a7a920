from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass, field
from typing import Any

from blake3 import blake3

# Separator for fingerprint features, unlikely to appear in a user agent.
_FEATURE_SEPARATOR = "&%&"


def _join(*parts: str | None) -> str | None:
    return ".".join(p for p in parts if p) or None


@dataclass(frozen=True)
class Product:
    """The browser or application."""

    name: str | None = None
    major: str | None = None
    minor: str | None = None
    patch: str | None = None

    @property
    def version(self) -> str | None:
        return _join(self.major, self.minor, self.patch)


@dataclass(frozen=True)
class OS:
    name: str | None = None
    major: str | None = None
    minor: str | None = None
    patch: str | None = None
    patch_minor: str | None = None

    @property
    def version(self) -> str | None:
        return _join(self.major, self.minor, self.patch, self.patch_minor)


@dataclass(frozen=True)
class Device:
    """``name`` is the device classification (e.g. ``iPhone``, ``Spider``)."""

    name: str | None = None
    brand: str | None = None
    model: str | None = None


@dataclass(frozen=True)
class CPU:
    architecture: str | None = None


@dataclass(frozen=True)
class Engine:
    """The rendering engine."""

    name: str | None = None
    major: str | None = None
    minor: str | None = None
    patch: str | None = None
    patch_minor: str | None = None

    @property
    def version(self) -> str | None:
        return _join(self.major, self.minor, self.patch, self.patch_minor)


@dataclass
class UserAgent:
    """Everything known about a client.

    ``ip`` is whatever the caller passed in, it is neither parsed nor
    validated. ``user_agent`` is the raw header, or ``None`` if it was empty.
    """

    ip: str | None = None
    fingerprint: str | None = None
    hash: str | None = None
    product: Product = field(default_factory=Product)
    os: OS = field(default_factory=OS)
    device: Device = field(default_factory=Device)
    cpu: CPU = field(default_factory=CPU)
    engine: Engine = field(default_factory=Engine)
    user_agent: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserAgent:
        return cls(
            ip=data.get("ip"),
            fingerprint=data.get("fingerprint"),
            hash=data.get("hash"),
            product=Product(**(data.get("product") or {})),
            os=OS(**(data.get("os") or {})),
            device=Device(**(data.get("device") or {})),
            cpu=CPU(**(data.get("cpu") or {})),
            engine=Engine(**(data.get("engine") or {})),
            user_agent=data.get("user_agent"),
        )

    @classmethod
    def from_json(cls, s: str | bytes) -> UserAgent:
        return cls.from_dict(json.loads(s))

    def normalized_string(self) -> str | None:
        """Pipe-separated product, OS and device, followed by the raw string.

        Empty sections are left out entirely.
        """
        if self.user_agent is None:
            return None

        p, o, d = self.product, self.os, self.device
        sections = [
            _join(p.name, p.major, p.minor, p.patch),
            _join(o.name, o.major, o.minor, o.patch, o.patch_minor),
            _join(d.name, d.brand, d.model),
        ]
        return "|".join([*(s for s in sections if s), self.user_agent])

    def make_hash(self) -> str | None:
        """Stable identifier for the (normalized) user agent family."""
        normalized = self.normalized_string()
        if normalized is None:
            return None
        return blake3(normalized.encode()).hexdigest()

    def make_fingerprint(self) -> str | None:
        ua = self.user_agent
        if ua is None:
            return None

        features = []

        if name := self.product.name:
            features.append(f"b:{name}")
            if major := self.product.major:
                features.append(f"bv:{major}")
                if minor := self.product.minor:
                    features.append(f"bvm:{major}.{minor}")

        if name := self.os.name:
            features.append(f"o:{name}")
            if major := self.os.major:
                features.append(f"ov:{major}")
                if minor := self.os.minor:
                    features.append(f"ovm:{major}.{minor}")

        if name := self.device.name:
            features.append(f"d:{name}")
            if brand := self.device.brand:
                features.append(f"db:{brand}")
            if model := self.device.model:
                features.append(f"dm:{model}")

        if arch := self.cpu.architecture:
            features.append(f"c:{arch}")

        if name := self.engine.name:
            features.append(f"e:{name}")
            if major := self.engine.major:
                features.append(f"ev:{major}")

        features.append(f"l:{len(ua)}")
        features.append(f"d:{sum(c in '0123456789' for c in ua)}")
        features.append(f"s:{sum(not c.isalnum() for c in ua)}")
        features.append(f"w:{len(ua.split())}")

        if "Mobile" in ua:
            features.append("fm:1")
        if "AppleWebKit" in ua:
            features.append("faw:1")
        if "Gecko" in ua:
            features.append("fg:1")
        if "Chrome" in ua:
            features.append("fc:1")
        elif "Safari" in ua:
            features.append("fs:1")
        if "Firefox" in ua:
            features.append("ff:1")
        if "Edge" in ua or "Edg/" in ua:
            features.append("fe:1")
        if "MSIE" in ua or "Trident" in ua:
            features.append("fi:1")

        if "Win" in ua:
            features.append("fow:1")
        elif "Mac" in ua:
            features.append("fom:1")
        elif "Linux" in ua:
            features.append("fol:1")
        elif "Android" in ua:
            features.append("foa:1")
        elif "iOS" in ua or "iPhone" in ua or "iPad" in ua:
            features.append("foi:1")

        # network part of the address only
        if ip := self.ip:
            if "." in ip:
                octets = ip.split(".")
                if len(octets) >= 2:
                    features.append(f"ip4:{octets[0]}.{octets[1]}")
            elif ":" in ip:
                segments = ip.split(":")
                if len(segments) >= 4:
                    features.append(f"ip6:{':'.join(segments[:4])}")

        primary = blake3(_FEATURE_SEPARATOR.join(sorted(features)).encode()).hexdigest()
        return blake3(primary.encode()).hexdigest()
