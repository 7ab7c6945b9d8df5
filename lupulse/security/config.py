from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from lupulse.security.context import Role


class AuthConfig(BaseModel):
    cookie_name: str = "token"


class DefaultRule(BaseModel):
    auth_required: bool = True
    min_role: Role | None = None


class RouteRule(BaseModel):
    path: str
    methods: list[str] = Field(default_factory=lambda: ["GET"])

    auth_required: bool | None = None
    min_role: Role | None = None

    def normalized_methods(self) -> set[str]:
        return {m.upper() for m in self.methods}


class SecurityConfigModel(BaseModel):
    auth: AuthConfig = Field(default_factory=AuthConfig)
    default: DefaultRule = Field(default_factory=DefaultRule)
    routes: list[RouteRule] = Field(default_factory=list)


@dataclass(frozen=True)
class EffectiveRule:
    """
    Fully-resolved rule (defaults applied) for a particular request.
    """

    auth_required: bool
    min_role: Role | None


def _path_template_to_regex(path_template: str) -> re.Pattern[str]:
    # "/users/{email}" -> r"^/users/[^/]+$"
    regex = re.sub(r"\{[^/]+\}", r"[^/]+", path_template)
    return re.compile(rf"^{regex}$")


class SecurityConfig:
    """
    Runtime helper around validated config + route matching.
    """

    def __init__(self, model: SecurityConfigModel):
        self.model = model

        # Literal paths are checked before templates, in file order within each group.
        self._exact_rules: dict[str, list[RouteRule]] = {}
        self._template_rules: list[tuple[re.Pattern[str], RouteRule]] = []
        for rule in model.routes:
            if "{" in rule.path:
                self._template_rules.append((_path_template_to_regex(rule.path), rule))
            else:
                self._exact_rules.setdefault(rule.path, []).append(rule)

    @property
    def auth(self) -> AuthConfig:
        return self.model.auth

    def match(self, path: str, method: str) -> EffectiveRule:
        """
        Find the best matching rule for (path, method), then apply defaults.
        """

        method = method.upper()
        default = self.model.default

        # 1) exact path match
        for candidate in self._exact_rules.get(path, []):
            if method in candidate.normalized_methods():
                return _effective(candidate, default)

        # 2) template match
        for regex, candidate in self._template_rules:
            if method not in candidate.normalized_methods():
                continue
            if regex.match(path):
                return _effective(candidate, default)

        # 3) no match -> defaults
        return EffectiveRule(auth_required=default.auth_required, min_role=default.min_role)


def _effective(rule: RouteRule, default: DefaultRule) -> EffectiveRule:
    min_role = rule.min_role if rule.min_role is not None else default.min_role

    # A role requirement always implies authentication, even on an otherwise public default.
    if rule.min_role is not None:
        auth_required = True
    elif rule.auth_required is not None:
        auth_required = rule.auth_required
    else:
        auth_required = default.auth_required

    return EffectiveRule(auth_required=auth_required, min_role=min_role if auth_required else None)


def load_security_config(path: Path) -> SecurityConfig:
    raw_text = path.read_text(encoding="utf-8")
    raw: dict[str, Any] = yaml.safe_load(raw_text) or {}

    if "security" not in raw:
        raise ValueError(f"Missing top-level 'security' key in config: {path}")

    model = SecurityConfigModel.model_validate(raw["security"])
    return SecurityConfig(model)
