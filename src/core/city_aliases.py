"""Pickup-city alias table.

Keys are lowercase aliases (abbreviations, common misspellings, landmarks and
neighbourhoods); values are canonical city names as they appear in the
``groups.cities`` config block.
"""

from __future__ import annotations

from typing import Optional

CITY_ALIASES: dict[str, str] = {
    # Delhi and NCR
    "dli": "Delhi",
    "delhi": "Delhi",
    "dehli": "Delhi",
    "dilli": "Delhi",
    "dilhi": "Delhi",
    "dilhe": "Delhi",
    "delhy": "Delhi",
    "new delhi": "Delhi",
    "delhi airport": "Delhi",
    "delhi junction": "Delhi",
    "delhi railway": "Delhi",
    "igi": "Delhi",
    "igi airport": "Delhi",
    "indira gandhi airport": "Delhi",
    "t1": "Delhi",
    "t2": "Delhi",
    "t3": "Delhi",
    "terminal 1": "Delhi",
    "terminal 2": "Delhi",
    "terminal 3": "Delhi",
    "terminal one": "Delhi",
    "terminal two": "Delhi",
    "terminal three": "Delhi",
    "terminal1": "Delhi",
    "terminal2": "Delhi",
    "terminal3": "Delhi",
    "aerocity": "Delhi",
    "connaught place": "Delhi",
    "cp": "Delhi",
    "dwarka": "Delhi",
    "dwarka sector": "Delhi",
    "kashmere gate": "Delhi",
    "kashmiri gate": "Delhi",
    "kashmir gate": "Delhi",
    "kashmeri gate": "Delhi",
    "isbt delhi": "Delhi",
    "anand vihar": "Delhi",
    "anand vihar isbt": "Delhi",
    "anand vihar terminal": "Delhi",
    "sarai kale khan": "Delhi",
    "sarai kale khan isbt": "Delhi",
    "nizamuddin": "Delhi",
    "hazrat nizamuddin": "Delhi",
    "nizamuddin railway": "Delhi",
    "new delhi railway": "Delhi",
    "new delhi station": "Delhi",
    "old delhi": "Delhi",
    "old delhi railway": "Delhi",
    "old delhi station": "Delhi",
    "ndls": "Delhi",
    "ajmeri gate": "Delhi",
    "sarai rohilla": "Delhi",
    "karol bagh": "Delhi",
    "paharganj": "Delhi",
    "chandni chowk": "Delhi",
    "india gate": "Delhi",
    "red fort": "Delhi",
    "rohini": "Delhi",
    "pitampura": "Delhi",
    "model town": "Delhi",
    "civil lines": "Delhi",
    "shahdara": "Delhi",
    "dilshad garden": "Delhi",
    "preet vihar": "Delhi",
    "mayur vihar": "Delhi",
    "kalkaji": "Delhi",
    "nehru place": "Delhi",
    "greater kailash": "Delhi",
    "gk": "Delhi",
    "gk 1": "Delhi",
    "gk 2": "Delhi",
    "defence colony": "Delhi",
    "saket": "Delhi",
    "hauz khas": "Delhi",
    "green park": "Delhi",
    "malviya nagar": "Delhi",
    "lajpat nagar": "Delhi",
    "south delhi": "Delhi",
    "east delhi": "Delhi",
    "west delhi": "Delhi",
    "north delhi": "Delhi",
    "central delhi": "Delhi",
    "janakpuri": "Delhi",
    "rajouri garden": "Delhi",
    "punjabi bagh": "Delhi",
    "paschim vihar": "Delhi",
    "kirti nagar": "Delhi",
    "moti nagar": "Delhi",
    "tilak nagar": "Delhi",
    "subhash nagar": "Delhi",
    "uttam nagar": "Delhi",
    "lakshmi nagar": "Delhi",
    "gtb nagar": "Delhi",
    "vijay nagar delhi": "Delhi",
    "shalimar bagh": "Delhi",
    "vasant vihar": "Delhi",
    "vasant kunj": "Delhi",
    "r k puram": "Delhi",
    "munirka": "Delhi",
    "mahipalpur": "Delhi",
    "vivek vihar": "Delhi",
    "rajiv chowk": "Delhi",
    "sadar": "Delhi",
    "sadar bazar": "Delhi",
    "okhla": "Delhi",

    # Gurgaon
    "ggn": "Gurgaon",
    "grg": "Gurgaon",
    "gurgaon": "Gurgaon",
    "gurgoan": "Gurgaon",
    "gurugram": "Gurgaon",
    "gurgao": "Gurgaon",
    "guragon": "Gurgaon",
    "cyber city": "Gurgaon",
    "cyber hub": "Gurgaon",
    "dlf cyber city": "Gurgaon",
    "golf course road": "Gurgaon",
    "golf course extension": "Gurgaon",
    "mg road": "Gurgaon",
    "mg road gurgaon": "Gurgaon",
    "huda city centre": "Gurgaon",
    "iffco chowk": "Gurgaon",
    "sushant lok": "Gurgaon",
    "dlf phase": "Gurgaon",
    "dlf phase 1": "Gurgaon",
    "dlf phase 2": "Gurgaon",
    "dlf phase 3": "Gurgaon",
    "dlf phase 4": "Gurgaon",
    "dlf phase 5": "Gurgaon",
    "dlf 1": "Gurgaon",
    "dlf 2": "Gurgaon",
    "dlf 3": "Gurgaon",
    "dlf 4": "Gurgaon",
    "dlf 5": "Gurgaon",
    "sector 29": "Gurgaon",
    "south city": "Gurgaon",
    "palam vihar": "Gurgaon",
    "udyog vihar": "Gurgaon",
    "sohna": "Gurgaon",
    "sohna road": "Gurgaon",
    "manesar": "Gurgaon",
    "new gurgaon": "Gurgaon",
    "old gurgaon": "Gurgaon",

    # Noida
    "noida": "Noida",
    "nioda": "Noida",
    "noyda": "Noida",
    "noeda": "Noida",
    "greater noida": "Noida",
    "gr noida": "Noida",
    "greater noida west": "Noida",
    "noida extension": "Noida",
    "noida sector": "Noida",
    "noida city": "Noida",
    "noida city centre": "Noida",
    "faridabad": "Noida",
    "ghaziabad": "Noida",
    "sector 15": "Noida",
    "sector 16": "Noida",
    "sector 18": "Noida",
    "sector 52": "Noida",
    "sector 58": "Noida",
    "sector 59": "Noida",
    "sector 61": "Noida",
    "sector 62": "Noida",
    "sector 63": "Noida",
    "sector 125": "Noida",
    "sector 137": "Noida",
    "botanical garden": "Noida",
    "film city": "Noida",
    "knowledge park": "Noida",
    "pari chowk": "Noida",
    "jewar": "Noida",
    "jewar airport": "Noida",

    # Ambala
    "amb": "Ambala",
    "ambl": "Ambala",
    "ambala": "Ambala",
    "ambala cantt": "Ambala",
    "ambala cantonment": "Ambala",
    "ambala city": "Ambala",
    "ambala railway station": "Ambala",

    # Patiala
    "pti": "Patiala",
    "ptl": "Patiala",
    "patiala": "Patiala",
    "patiyala": "Patiala",
    "pattiala": "Patiala",
    "nabha": "Patiala",
    "rajpura": "Patiala",
    "samana": "Patiala",
    "sirhind": "Patiala",

    # Chandigarh tricity
    "chd": "Chandigarh",
    "chandi": "Chandigarh",
    "chandigarh": "Chandigarh",
    "chandhigarh": "Chandigarh",
    "chandigrah": "Chandigarh",
    "chandiarh": "Chandigarh",
    "chandigad": "Chandigarh",
    "chandigarh airport": "Chandigarh",
    "chandigarh sector": "Chandigarh",
    "isbt 17": "Chandigarh",
    "isbt 43": "Chandigarh",
    "isbt chandigarh": "Chandigarh",
    "sector 17": "Chandigarh",
    "sector 35": "Chandigarh",
    "sec 17": "Chandigarh",
    "sec 35": "Chandigarh",
    "sector": "Chandigarh",
    "43 bus stand": "Chandigarh",
    "43 isbt": "Chandigarh",
    "bus stand 43": "Chandigarh",
    "chandigarh 43": "Chandigarh",
    "panchkula": "Chandigarh",
    "panchkoola": "Chandigarh",
    "pgi": "Chandigarh",
    "pgimer": "Chandigarh",
    "pkl": "Chandigarh",

    # Zirakpur
    "zkp": "Zirakpur",
    "zirakpur": "Zirakpur",
    "zirkapur": "Zirakpur",
    "zirkpur": "Zirakpur",
    "jerkpur": "Zirakpur",
    "zirapur": "Zirakpur",
    "dera bassi": "Zirakpur",
    "dera basi": "Zirakpur",
    "derabassi": "Zirakpur",
    "dhakoli": "Zirakpur",
    "dhakauli": "Zirakpur",

    # Mohali
    "mhl": "Mohali",
    "mohali": "Mohali",
    "mohli": "Mohali",
    "mohaali": "Mohali",
    "moali": "Mohali",
    "mohali airport": "Mohali",
    "mohali phase": "Mohali",
    "mohali sector": "Mohali",
    "phase 10": "Mohali",
    "phase 11": "Mohali",
    "sahibzada ajit singh nagar": "Mohali",
    "sas nagar": "Mohali",
    "kharar": "Mohali",
    "khrar": "Mohali",
    "kharad": "Mohali",
    "kahrar": "Mohali",
    "kurali": "Mohali",
    "landran": "Mohali",
    "morinda": "Mohali",

    # Amritsar
    "asr": "Amritsar",
    "amritsar": "Amritsar",
    "amritser": "Amritsar",
    "amritsarr": "Amritsar",
    "amritsir": "Amritsar",
    "amritar": "Amritsar",
    "amritsar airport": "Amritsar",
    "golden temple": "Amritsar",
    "wagah border": "Amritsar",
    "abohar": "Amritsar",
    "beas": "Amritsar",

    # Ludhiana
    "ldh": "Ludhiana",
    "ludhiana": "Ludhiana",
    "ludhiyana": "Ludhiana",
    "ludhianaa": "Ludhiana",
    "ludiana": "Ludhiana",
    "ludhianna": "Ludhiana",
    "khanna": "Ludhiana",

    # Jalandhar
    "jld": "Jalandhar",
    "jalandhar": "Jalandhar",
    "jalandar": "Jalandhar",
    "jullundur": "Jalandhar",
    "jalandarh": "Jalandhar",
    "phagwara": "Jalandhar",
}


def canonical_city(alias: str) -> Optional[str]:
    """Return the canonical city for an alias, or None."""

    if not alias:
        return None
    return CITY_ALIASES.get(alias.lower().strip())
