"""
Dark-mode CSS for email clients.

Three mechanisms are emitted because no single one is honored everywhere:
the prefers-color-scheme media query (Apple Mail, iOS, Outlook for Mac),
the [data-ogsc] attribute hook Gmail and Outlook apps add in dark mode, and
a .force-dark override set used by previews. Every mechanism reads its
values from the same declaration table, so a role always gets one color.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Tuple

# role -> (class name, CSS property)
ROLE_TARGETS: Dict[str, Tuple[str, str]] = {
    "background": ("dark-mode-bg", "background-color"),
    "text": ("dark-mode-text", "color"),
    "secondaryText": ("dark-mode-secondary", "color"),
    "link": ("dark-mode-link", "color"),
    "border": ("dark-mode-border", "border-color"),
    "success": ("dark-mode-success", "color"),
    "warning": ("dark-mode-warning", "color"),
    "error": ("dark-mode-error", "color"),
}

FORCE_DARK_CLASS = "force-dark"


def role_class(role: str) -> str:
    return ROLE_TARGETS[_role_key(role)][0]


def _role_key(role: object) -> str:
    return getattr(role, "value", role)  # ColorRole or plain str


def dark_mode_declarations(dark: Mapping) -> Dict[str, Tuple[str, str]]:
    """role -> (selector class, declaration with !important), in role table order."""
    values = {_role_key(role): value for role, value in dark.items()}
    declarations: Dict[str, Tuple[str, str]] = {}
    for role, (class_name, prop) in ROLE_TARGETS.items():
        if role in values:
            declarations[role] = (class_name, f"{prop}: {values[role]} !important;")
    return declarations


def dark_mode_block(light: Mapping, dark: Mapping) -> str:
    """CSS text for all three dark-mode mechanisms."""
    light_roles = {_role_key(role) for role in light}
    dark_roles = {_role_key(role) for role in dark}
    if light_roles != dark_roles:
        unpaired = ", ".join(sorted(light_roles ^ dark_roles))
        raise ValueError(f"Light and dark palettes must share roles (unpaired: {unpaired})")

    declarations = dark_mode_declarations(dark)
    media_rules = [f"      .{cls} {{ {decl} }}" for cls, decl in declarations.values()]
    media_rules.append("      .dark-mode-img { opacity: 0.9 !important; }")
    lines: List[str] = ["    @media (prefers-color-scheme: dark) {", *media_rules, "    }"]
    lines.extend(f"    [data-ogsc] .{cls} {{ {decl} }}" for cls, decl in declarations.values())
    lines.extend(f"    .{FORCE_DARK_CLASS} .{cls} {{ {decl} }}" for cls, decl in declarations.values())
    return "\n".join(lines)


def add_gmail_dark_mode_support(dark: Mapping) -> str:
    """Gmail webmail hook: body gets class "body" and Gmail prefixes it with a <u> element."""
    declarations = dark_mode_declarations(dark)
    lines = ["    /* Gmail-specific dark mode */"]
    for role in ("background", "text"):
        if role in declarations:
            cls, decl = declarations[role]
            lines.append(f"    u + .body .{cls} {{ {decl} }}")
    return "\n".join(lines)


def add_apple_mail_dark_mode_support(dark: Mapping) -> str:
    declarations = dark_mode_declarations(dark)
    lines = ["    /* Apple Mail dark mode */", "    @media (prefers-color-scheme: dark) {"]
    for role in ("background", "text"):
        if role in declarations:
            cls, decl = declarations[role]
            lines.append(f"      .{cls} {{ {decl} }}")
    lines.append("    }")
    return "\n".join(lines)


def meta_tags(enabled: bool) -> List[str]:
    scheme = "light dark" if enabled else "light"
    return [
        f'<meta name="color-scheme" content="{scheme}"/>',
        f'<meta name="supported-color-schemes" content="{scheme}"/>',
    ]
