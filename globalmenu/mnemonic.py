"""Conversion of mnemonic markers between menu label conventions."""


def _check_char(name: str, value: str) -> None:
    if not isinstance(value, str) or len(value) != 1:
        raise ValueError(f"{name} must be a single character, got {value!r}")


def swap_mnemonic_char(text: str, src: str, dst: str) -> str:
    """Rewrite the mnemonic marker ``src`` in ``text`` as ``dst``.

    A doubled ``src`` stands for a literal ``src``. Only the first single
    ``src`` becomes a mnemonic; later ones and a trailing one are dropped.
    Every ``dst`` already in the text is escaped by doubling it.
    """
    _check_char("src", src)
    _check_char("dst", dst)

    out: list[str] = []
    mnemonic_found = False
    chars = iter(enumerate(text))
    last = len(text) - 1

    for pos, ch in chars:
        if ch == src:
            if pos == last:
                continue
            if text[pos + 1] == src:
                out.append(src)
                next(chars)
            elif not mnemonic_found:
                mnemonic_found = True
                out.append(dst)
        elif ch == dst:
            out.append(dst + dst)
        else:
            out.append(ch)

    return "".join(out)