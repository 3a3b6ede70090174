"""Language code normalization for mediainfo reports.

mediainfo reports languages as ISO 639-1 codes ("en") in its JSON and
recent XML output, and as English language names ("English") in legacy
XML output. HandBrake track names use ISO 639-2/B codes.
"""

UNDETERMINED = "und"

ISO_639_1_TO_639_2 = {
    "en": "eng",
    "es": "spa",
    "fr": "fre",
    "de": "ger",
    "it": "ita",
    "pt": "por",
    "ru": "rus",
    "ja": "jpn",
    "ko": "kor",
    "zh": "chi",
    "ar": "ara",
    "hi": "hin",
    "nl": "dut",
    "pl": "pol",
    "tr": "tur",
    "sv": "swe",
    "da": "dan",
    "no": "nor",
    "fi": "fin",
    "cs": "cze",
    "hu": "hun",
    "ro": "rum",
    "th": "tha",
    "vi": "vie",
    "id": "ind",
    "he": "heb",
    "el": "gre",
    "uk": "ukr",
    "ca": "cat",
    "sk": "slo",
    "hr": "hrv",
    "sr": "srp",
    "bg": "bul",
    "lt": "lit",
    "lv": "lav",
    "et": "est",
    "sl": "slv",
    "fa": "per",
    "ms": "may",
    "ta": "tam",
    "te": "tel",
    "bn": "ben",
    "mr": "mar",
}

LANGUAGE_NAME_TO_639_2 = {
    "english": "eng",
    "spanish": "spa",
    "french": "fre",
    "german": "ger",
    "italian": "ita",
    "portuguese": "por",
    "russian": "rus",
    "japanese": "jpn",
    "korean": "kor",
    "chinese": "chi",
    "arabic": "ara",
    "hindi": "hin",
    "dutch": "dut",
    "polish": "pol",
    "turkish": "tur",
    "swedish": "swe",
    "danish": "dan",
    "norwegian": "nor",
    "finnish": "fin",
    "czech": "cze",
    "hungarian": "hun",
    "romanian": "rum",
    "thai": "tha",
    "vietnamese": "vie",
    "indonesian": "ind",
    "hebrew": "heb",
    "greek": "gre",
    "ukrainian": "ukr",
    "catalan": "cat",
    "slovak": "slo",
    "croatian": "hrv",
    "serbian": "srp",
    "bulgarian": "bul",
    "lithuanian": "lit",
    "latvian": "lav",
    "estonian": "est",
    "slovenian": "slv",
    "persian": "per",
    "malay": "may",
    "tamil": "tam",
    "telugu": "tel",
    "bengali": "ben",
    "marathi": "mar",
}

# ISO 639-2/T terminology codes and their 639-2/B equivalents
ISO_639_2_T_TO_B = {
    "deu": "ger",
    "fra": "fre",
    "zho": "chi",
    "nld": "dut",
    "ces": "cze",
    "ron": "rum",
    "ell": "gre",
    "slk": "slo",
    "fas": "per",
    "msa": "may",
    "sqi": "alb",
    "hye": "arm",
    "eus": "baq",
    "mya": "bur",
    "kat": "geo",
    "isl": "ice",
    "mkd": "mac",
    "mri": "mao",
    "bod": "tib",
    "cym": "wel",
}


def normalize_language(value: str | None) -> str:
    """Normalize a mediainfo language value to a 3-letter ISO 639-2 code.

    Accepts 2-letter codes, 3-letter codes, region-tagged codes ("en-US")
    and English language names. Terminology codes ("deu") map to their
    bibliographic form ("ger"). Unknown 2-letter codes and names are
    returned lowercased; empty values become "und".

    Args:
        value: Raw language value from mediainfo

    Returns:
        Normalized language code
    """
    if not value:
        return UNDETERMINED

    code = value.strip().lower()
    if not code:
        return UNDETERMINED

    # "en-US" -> "en"
    code = code.split("-")[0]

    if len(code) == 2:
        return ISO_639_1_TO_639_2.get(code, code)

    if len(code) == 3:
        return ISO_639_2_T_TO_B.get(code, code)

    return LANGUAGE_NAME_TO_639_2.get(code, code)
