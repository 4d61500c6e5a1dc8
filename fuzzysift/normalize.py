"""Folding of accented Latin letters to their plain ASCII base letter."""

_LOWEST = 0x00C0
_HIGHEST = 0x2184

_BY_BASE = {
    "a": "\u00e1\u0103\u01ce\u00e2\u00e4\u0227\u1ea1\u0201\u00e0\u1ea3\u0203"
         "\u0101\u0105\u1e9a\u00e5\u1e01\u00e3\u0363\u0250\u0251"
         "ắấằầẳẩẵẫặậ",
    "b": "\u1e03\u1e05\u0253\u1e07\u0180\u0183",
    "c": "\u0107\u010d\u00e7\u0109\u0255\u010b\u0188\u023c\u0368\u0297\u2184",
    "d": "\u010f\u1e11\u1e13\u0221\u1e0b\u1e0d\u0257\u1e0f\u0111\u0256\u018c\u0369",
    "e": "\u00e9\u0115\u011b\u0229\u1e19\u00ea\u00eb\u0117\u1eb9\u0205\u00e8"
         "\u1ebb\u025d\u0207\u0113\u0119\u0247\u1e1b\u1ebd\u0364\u029a\u025e"
         "\u025b\u0258\u025c\u01dd\u1d08"
         "ếềểễệ",
    "f": "\u1e1f\u0192",
    "g": "\u01f5\u011f\u01e7\u0123\u011d\u0121\u0260\u1e21\u01e5\u0261",
    "h": "\u1e2b\u021f\u1e29\u0125\u1e27\u1e23\u1e25\u02ae\u0266\u1e96\u0127"
         "\u036a\u0265\u2095",
    "i": "\u00ed\u012d\u01d0\u00ee\u00ef\u1ecb\u0209\u00ec\u1ec9\u020b\u012b"
         "\u012f\u0268\u1e2d\u0129\u0365\u0131\u1d09\u1d62\u2071",
    "j": "\u01f0\u0135\u029d\u0249\u025f\u0237",
    "k": "\u1e31\u01e9\u0137\u1e33\u0199\u1e35\u029e\u2096",
    "l": "\u013a\u019a\u026c\u013e\u013c\u1e3d\u0234\u1e37\u1e3b\u0140\u026b"
         "\u026d\u0142\u2097",
    "m": "\u1e3f\u1e41\u1e43\u0271\u0270\u036b\u1d1f\u026f\u2098",
    "n": "\u0144\u0148\u0146\u1e4b\u0235\u1e45\u1e47\u01f9\u0272\u1e49\u019e"
         "\u0273\u00f1\u2099",
    "o": "\u00f3\u014f\u01d2\u00f4\u00f6\u022f\u1ecd\u0151\u020d\u00f2\u1ecf"
         "\u01a1\u020f\u014d\u01eb\u00f8\u1d13\u00f5\u0366\u0275\u1d17\u0254"
         "\u1d11\u1d12\u1d16"
         "ốớồờổởỗỡộợ",
    "p": "\u1e55\u1e57\u01a5\u209a",
    "q": "\u024b\u02a0",
    "r": "\u0155\u0159\u0157\u1e59\u1e5b\u0211\u027e\u027f\u027b\u0213\u1e5f"
         "\u027c\u027a\u024d\u027d\u036c\u0279\u1d63",
    "s": "\u015b\u0161\u015f\u015d\u0219\u1e61\u1e9b\u1e63\u0282\u023f\u017f"
         "\u00df\u209b",
    "t": "\u0165\u0163\u1e71\u021b\u0236\u1e97\u1e6b\u1e6d\u01ad\u1e6f\u01ab"
         "\u0288\u0167\u036d\u0287\u209c",
    "u": "\u0289\u00fa\u016d\u01d4\u1e77\u00fb\u1e73\u00fc\u1ee5\u0171\u0215"
         "\u00f9\u1ee7\u01b0\u0217\u016b\u0173\u016f\u1e75\u0169\u0367\u1d1d"
         "\u1d1e\u1d64"
         "ứừửữự",
    "v": "\u1e7f\u028b\u1e7d\u036e\u028c\u1d65",
    "w": "\u1e83\u0175\u1e85\u1e87\u1e89\u1e81\u1e98\u028d",
    "x": "\u1e8d\u1e8b\u036f",
    "y": "\u00fd\u0177\u00ff\u1e8f\u1ef5\u1ef3\u1ef7\u01b4\u0233\u1e99\u024f"
         "\u1ef9\u028e",
    "z": "\u017a\u017e\u1e91\u0291\u017c\u1e93\u0225\u1e95\u0290\u01b6\u0240",
    "A": "\u00c1\u00c2\u00c4\u00c0\u00c5\u023a\u00c3\u1d00"
         "ẮẤẰẦẲẨẴẪẶẬ",
    "B": "\u0181\u0243\u0299\u1d03",
    "C": "\u00c7\u023b\u1d04",
    "D": "\u018a\u0189\u1d05",
    "E": "\u00c9\u00ca\u00cb\u00c8\u0246\u0190\u018e\u1d07"
         "ẾỀỂỄỆ",
    "G": "\u0193\u029b\u0262",
    "H": "\u029c",
    "I": "\u00cd\u00ce\u00cf\u0130\u00cc\u0197\u026a",
    "J": "\u0248\u1d0a",
    "K": "\u1d0b",
    "L": "\u023d\u1d0c\u029f",
    "M": "\u019c\u1d0d",
    "N": "\u019d\u0220\u00d1\u0274\u1d0e",
    "O": "\u00d3\u00d4\u00d6\u00d2\u019f\u00d8\u00d5\u0186\u1d0f\u1d10"
         "ỐỚỒỜỔỞỖỠỘỢ",
    "P": "\u1d18",
    "Q": "\u024a",
    "R": "\u024c\u0280\u0281\u1d19\u1d1a",
    "T": "\u023e\u01ae\u1d1b",
    "U": "\u0244\u00da\u00db\u00dc\u00d9\u1d1c"
         "ỨỪỬỮỰ",
    "V": "\u01b2\u0245\u1d20",
    "W": "\u1d21",
    "Y": "\u00dd\u0178\u024e\u028f",
    "Z": "\u1d22",
}

_TABLE: dict[int, str] = {
    ord(char): base for base, chars in _BY_BASE.items() for char in chars
}


def normalize_rune(char: str) -> str:
    """Return the base letter of a single accented Latin character, or the character itself."""
    if len(char) != 1:
        raise ValueError(f"expected a single character, got {char!r}")
    code = ord(char)
    if code < _LOWEST or code > _HIGHEST:
        return char
    return _TABLE.get(code, char)


def normalize_text(text: str) -> str:
    """Fold every accented Latin letter in *text* to its base letter."""
    return text.translate(_TABLE)