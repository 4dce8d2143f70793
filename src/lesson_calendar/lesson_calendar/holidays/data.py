"""Static holiday tables (Korea).

Fixed (solar) holidays recur every year. Lunar-derived holidays move every
year and have to be listed per year; a year missing from SHIFTING_HOLIDAYS
simply has no shifting holidays until the table is extended.
"""

FIXED_HOLIDAYS: dict[str, str] = {
    "01-01": "New Year's Day",
    "03-01": "Independence Movement Day",
    "05-05": "Children's Day",
    "06-06": "Memorial Day",
    "08-15": "Liberation Day",
    "10-03": "National Foundation Day",
    "10-09": "Hangul Day",
    "12-25": "Christmas Day",
}

SHIFTING_HOLIDAYS: dict[int, dict[str, str]] = {
    2024: {
        "02-09": "Seollal Holiday",
        "02-10": "Seollal",
        "02-11": "Seollal Holiday",
        "02-12": "Substitute Holiday (Seollal)",
        "04-10": "22nd National Assembly Election",
        "05-15": "Buddha's Birthday",
        "09-16": "Chuseok Holiday",
        "09-17": "Chuseok",
        "09-18": "Chuseok Holiday",
    },
    2025: {
        "01-28": "Seollal Holiday",
        "01-29": "Seollal",
        "01-30": "Seollal Holiday",
        "05-05": "Buddha's Birthday",
        "10-05": "Chuseok Holiday",
        "10-06": "Chuseok",
        "10-07": "Chuseok Holiday",
        "10-08": "Substitute Holiday (Chuseok)",
    },
    2026: {
        "02-16": "Seollal Holiday",
        "02-17": "Seollal",
        "02-18": "Seollal Holiday",
        "05-24": "Buddha's Birthday",
        "09-24": "Chuseok Holiday",
        "09-25": "Chuseok",
        "09-26": "Chuseok Holiday",
    },
    2027: {
        "02-06": "Seollal Holiday",
        "02-07": "Seollal",
        "02-08": "Seollal Holiday",
        "02-09": "Substitute Holiday (Seollal)",
        "05-13": "Buddha's Birthday",
        "09-14": "Chuseok Holiday",
        "09-15": "Chuseok",
        "09-16": "Chuseok Holiday",
    },
}
