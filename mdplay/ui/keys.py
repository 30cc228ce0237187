"""Decoding of raw terminal input into key names."""

ENTER = "enter"
ESCAPE = "escape"
TAB = "tab"
SPACE = "space"
BACKSPACE = "backspace"

CSI_FINAL = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
    "Z": "backtab",
}

CSI_TILDE = {
    "1": "home",
    "3": "delete",
    "4": "end",
    "5": "pageup",
    "6": "pagedown",
    "7": "home",
    "8": "end",
}

CONTROL = {
    "\r": ENTER,
    "\n": ENTER,
    "\t": TAB,
    " ": SPACE,
    "\x7f": BACKSPACE,
    "\x08": BACKSPACE,
}


def _csi(text: str, start: int) -> tuple[str, int]:
    """Decode ``ESC [ params final`` beginning at ``start`` (the ``[``)."""
    end = start + 1
    while end < len(text) and not ("@" <= text[end] <= "~"):
        end += 1
    if end >= len(text):
        return ESCAPE, len(text)
    params, final = text[start + 1:end], text[end]
    if final == "~":
        return CSI_TILDE.get(params.split(";")[0], "unknown"), end + 1
    return CSI_FINAL.get(final, "unknown"), end + 1


def decode_keys(data: bytes) -> list[str]:
    """
    Split one read from the terminal into key names.

    Arrow keys arrive as ``ESC [ X`` (normal cursor mode) or ``ESC O X``
    (application cursor mode). A lone ESC is the escape key. Printable
    characters are returned as themselves; other control bytes are dropped.
    """
    text = data.decode("utf-8", errors="ignore")
    keys: list[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\x1b":
            nxt = text[i + 1] if i + 1 < len(text) else ""
            if nxt == "[":
                key, i = _csi(text, i + 1)
                keys.append(key)
                continue
            if nxt == "O" and i + 2 < len(text):
                keys.append(CSI_FINAL.get(text[i + 2], "unknown"))
                i += 3
                continue
            keys.append(ESCAPE)
            i += 1
            continue
        if ch in CONTROL:
            keys.append(CONTROL[ch])
        elif ch.isprintable():
            keys.append(ch)
        i += 1
    return [key for key in keys if key != "unknown"]
