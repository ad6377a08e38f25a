"""Turn schema supplied names into safe C++ identifiers."""

CPP_RESERVED_WORDS = frozenset({
    "alignas", "alignof", "and", "and_eq", "asm", "auto", "bitand", "bitor", "bool", "break",
    "case", "catch", "char", "char8_t", "char16_t", "char32_t", "class", "compl", "concept",
    "const", "consteval", "constexpr", "constinit", "const_cast", "continue", "co_await", "co_return",
    "co_yield", "decltype", "default", "delete", "do", "double", "dynamic_cast", "else",
    "enum", "explicit", "export", "extern", "false", "float", "for", "friend", "goto", "if",
    "import", "inline", "int", "long", "module", "mutable", "namespace", "new", "noexcept", "not",
    "not_eq", "nullptr", "operator", "or", "or_eq", "private", "protected", "public", "reflexpr",
    "register", "reinterpret_cast", "requires", "return", "short", "signed", "sizeof", "static",
    "static_assert", "static_cast", "struct", "switch", "synchronized", "template", "this",
    "thread_local", "throw", "true", "try", "typedef", "typeid", "typename", "union", "unsigned",
    "using", "virtual", "void", "volatile", "wchar_t", "while", "xor", "xor_eq",
})


def decorate(name: str) -> str:
    """Escape ``name`` with a trailing underscore if it is a C++ keyword."""
    if name in CPP_RESERVED_WORDS:
        return name + '_'
    return name


def make_canonical(text: str, fold_case: bool) -> str:
    """Keep letters and digits of ``text`` and replace everything else with ``_``.

    Letters are upper-cased when ``fold_case`` is set.
    """
    chars = []
    for ch in text:
        if ch.isascii() and ch.isalpha():
            chars.append(ch.upper() if fold_case else ch)
        elif ch.isascii() and ch.isdigit():
            chars.append(ch)
        else:
            chars.append('_')
    return ''.join(chars)
