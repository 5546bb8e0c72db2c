"""
Curated Darija resources — keyword lexicon, regex tables and idioms.

Latin entries follow the common Arabizi spellings seen in chat logs; Arabic
entries avoid words shared with Modern Standard Arabic so that MSA text does
not light up the keyword signal.
"""

from __future__ import annotations

DARIJA_KEYWORDS: frozenset[str] = frozenset({
    # Greetings and politeness (Latin)
    "salam", "ahlan", "labas", "bikhir", "hamdullah", "hamdoulah", "inchallah",
    "nchallah", "machakil", "wakha", "safi", "yak", "smhli", "smh", "3afak",
    "baraka", "barak", "llah", "allah", "yallah", "mrhba", "marhba",

    # Pronouns and particles
    "ana", "nta", "nti", "ntuma", "ntoma", "hna", "7na", "huma", "homa", "howa",
    "hiya", "rah", "raha", "gha", "ghadi", "li", "dyal", "dial", "diali", "dyali",
    "bach", "ila", "walakin", "hitach", "7it", "wach", "ach", "achno", "chno",
    "chnou", "fayn", "feen", "fuqash", "fo9ach", "kifash", "kifach", "kif",
    "chhal", "ch7al", "3lach", "3lash", "mnin", "emta", "imta",

    # Temporal markers
    "daba", "ghda", "lbare7", "lbareh", "dghya",

    # Negation and quantity
    "makayn", "makaynch", "makach", "walu", "walou", "mashi", "machi", "bzaf",
    "bezaf", "chwiya", "shwiya", "kayn", "kayna", "kaynin",

    # Verbs
    "bghit", "bgha", "bghina", "bghiti", "kan", "knt", "kanu", "gals", "galsa",
    "mcha", "mchit", "ja", "jat", "jaw", "drt", "daru", "dir", "qra",
    "qrat", "kteb", "ktbt", "fhmt", "fhmti", "fhemti", "3reft", "ma3reftch",
    "kan3ref", "khdem", "khdemt", "aji", "goul", "tkellem",

    # Adjectives
    "zwin", "zwina", "mezyan", "mzyan", "mzyana", "khayb", "khayba", "sahel",
    "sahla", "m9awed", "ghali", "rkhis",

    # Kinship
    "khoya", "khouya", "khti", "ukhti", "sahbi", "sa7bi",
    "wlidi", "bnti", "3ami", "khali", "jdda", "jeddi",

    # Food, commerce and transport
    "khobz", "atay", "lhem", "djaj", "7ut", "l7ut", "ftor", "flus", "flous",
    "drham", "dirham", "ryal", "hanut", "l7anut", "suq",
    "khdma", "khdmt", "tomobil", "tonobil", "lkar", "blasa",
    "haja", "7aja", "chi", "hadchi", "hadak", "hadik", "dik", "dak",

    # Arabic-script forms
    "واش", "شنو", "شنوا", "فين", "دابا", "بزاف", "مزيان", "مزيانة", "لاباس",
    "غادي", "ماشي", "علاش", "كيفاش", "بغيت", "بغا", "ديال", "ديالي", "حيت",
    "هادشي", "شحال", "واخا", "صافي", "خويا", "ختي", "زوين", "زوينة", "كاين",
    "كاينة", "ماكاينش", "عافاك", "شي", "شوية", "نتا", "نتي", "حنا", "هوما",
    "راه", "راني", "مشيت", "درت", "دير", "بلاصة", "فلوس", "خدمة",
    "طوموبيل", "لحانوت", "مكاين", "والو", "ماعرفتش", "كنعرف", "فهمتي",
})

CODE_SWITCHING_PATTERNS: tuple[str, ...] = (
    # French pronoun followed by a Darija particle
    r"\b(je|tu|il|elle|nous|vous|ils|elles)\s+(rah|gha|ghadi|li|dyal|kan)\b",
    r"\b(c'est|c'etait|c'était|il y a)\s+(zwin|zwina|mezyan|mzyan|khayb|bzaf)\b",
    r"\b(très|tres|trop|assez)\s+(zwin|zwina|mezyan|mzyan|sahel|khayb)\b",
    # Darija head with a French complement
    r"\b(ana|nta|nti)\s+(je|tu|moi|toi)\b",
    r"\b(bghit|bgha|bghiti)\s+(que|de|à|a|le|la|les|un|une)\b",
    r"\b(wakha|safi|yak)\s+(mais|donc|alors|bon)\b",
    r"\b(daba|ghadi)\s+(maintenant|après|apres|demain)\b",
    r"\b(hier|aujourd'hui|demain|ce soir)\s+(kan|gha|rah|ghadi)\b",
    # French noun + Darija possessive ("le rendez-vous dyali")
    r"\b[a-zéèàç]{3,}\s+(dyal|dial|dyali|diali|dyalek|dyalna)\b",
    # Darija particle + French noun in Arabic script context
    r"(ديال|ديالي)\s+[a-zéèàç]{3,}",
)

MORPHOLOGICAL_PATTERNS: tuple[str, ...] = (
    # Verbal suffixes (-it, -at, -u, -na, -tu, -w)
    r"\b[a-z]{2,}(it|at|u|na|tu|w)\b",
    # Aspect and negation prefixes (ka-, ta-, ma-, la-)
    r"\b(ka|ta|ma|la)[a-z]{2,}\b",
    # Possessive suffixes
    r"\b[a-z]{2,}(ha|hum|hom|kum|kom|k|i|na)\b",
    # Diminutives
    r"\b[a-z]{2,}(iya|iyya|awi|awa)\b",
    # Arabic-script aspect prefixes (كا / كي / تا)
    r"(?<![\u0600-\u06ff])(كا|كي|تا)[\u0621-\u064a]{2,}",
    # Negation circumfix ma...ch (ماعرفتش, مابغيتش)
    r"(?<![\u0600-\u06ff])ما[\u0621-\u064a]{2,}ش(?![\u0600-\u06ff])",
)

IDIOMATIC_EXPRESSIONS: tuple[str, ...] = (
    "allah yhdik", "allah ysahel", "allah yster", "baraka allah fik",
    "la bas alik", "labas 3lik", "chno akhbar", "kifash dayer", "kidayr",
    "wach labas", "safi haka", "wakha haka", "makayn mushkil", "makayn mochkil",
    "bzaf zwina", "chwiya chwiya", "yallah bina", "allah ma3ak", "inchallah ghadi",
    "allah y3awn", "allah ykhlik", "la3ziz", "bslama", "tbarkallah",
    "الله يهديك", "الله يسهل", "الله يستر", "بارك الله فيك", "لاباس عليك",
    "شنو خبارك", "كيداير", "كيدايرة", "واش لاباس", "صافي هكا", "ماكاين مشكل",
    "شوية بشوية", "يالله بينا", "الله يعاونك", "الله يخليك", "تبارك الله",
)

# Arabizi digits standing for Arabic phonemes (ء ع خ ط ح ق)
ARABIZI_DIGITS: str = "235679"
