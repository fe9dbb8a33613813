"""Exam centre code → city name lookup.

Centre identifiers in the statistics feed are two-digit codes.  The
dashboard shows them as ``"City Name (code)"``; codes missing from the
table render as-is.
"""

from __future__ import annotations

import re

CENTRE_CITIES: dict[str, str] = {
    "01": "Ahmedabad",
    "02": "Prayagraj",
    "03": "Bengaluru",
    "04": "Bhopal",
    "05": "Mumbai",
    "06": "Kolkata",
    "07": "Cuttack",
    "08": "Delhi",
    "09": "Dispur",
    "10": "Hyderabad",
    "11": "Jaipur",
    "12": "Chennai",
    "13": "Nagpur",
    "14": "Dehradun",
    "15": "Patna",
    "16": "Shillong",
    "17": "Shimla",
    "18": "Srinagar",
    "19": "Thiruvananthapuram",
    "20": "Puducherry",
    "21": "Aligarh",
    "22": "Jodhpur",
    "24": "Kochi",
    "26": "Lucknow",
    "34": "Jammu",
    "35": "Chandigarh",
    "36": "Panaji (Goa)",
    "37": "Port Blair",
    "38": "Chhatrapati Sambhajinagar",
    "39": "Dharwad",
    "40": "Madurai",
    "41": "Ranchi",
    "42": "Gangtok",
    "43": "Kohima",
    "44": "Imphal",
    "45": "Agartala",
    "46": "Jorhat",
    "47": "Aizawl",
    "48": "Itanagar",
    "49": "Raipur",
    "50": "Tirupati",
    "51": "Vishakhapatnam",
    "52": "Udaipur",
    "53": "Sambalpur",
    "54": "Bareilly",
    "56": "Coimbatore",
    "57": "Kozhikode",
    "58": "Gautam Budh Nagar",
    "59": "Ghaziabad",
    "60": "Gorakhpur",
    "61": "Varanasi",
    "62": "Vijayawada",
    "63": "Gurugram",
    "64": "Faridabad",
    "65": "Navi Mumbai",
    "66": "Pune",
    "67": "Thane",
    "68": "Jabalpur",
    "69": "Gwalior",
    "70": "Ludhiana",
    "71": "Ajmer",
    "72": "Rajkot",
    "73": "Mysuru",
    "74": "Vellore",
    "75": "Tiruchirapalli",
    "76": "Ananthapuru",
    "77": "Bilaspur",
    "78": "Indore",
    "79": "Agra",
    "80": "Gaya",
    "81": "Siliguri",
    "82": "Hanumakonda (Warangal Urban)",
    "84": "Srinagar (Uttarakhand)",
    "85": "Almora",
    "86": "Nashik",
    "87": "Surat",
    "88": "Dharamshala",
    "89": "Mandi",
}

_DISPLAY_CODE = re.compile(r"\((\d+)\)$")


def _is_all_label(value: str) -> bool:
    return not value or value.lower().startswith("all")


def centre_name(code: str) -> str:
    """City name for *code*, or the code itself when unknown."""
    if _is_all_label(code):
        return code
    return CENTRE_CITIES.get(code, code)


def format_centre(code: str) -> str:
    """Render a centre code for display: ``"Delhi (08)"``."""
    if _is_all_label(code):
        return code
    name = CENTRE_CITIES.get(code)
    return f"{name} ({code})" if name else code


def extract_centre_code(display_value: str) -> str:
    """Inverse of format_centre: ``"Delhi (08)"`` → ``"08"``."""
    if _is_all_label(display_value):
        return display_value
    match = _DISPLAY_CODE.search(display_value.strip())
    if match:
        return match.group(1)
    return display_value
