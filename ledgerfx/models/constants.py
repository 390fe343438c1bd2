"""Domain constants: ledger currency, display-currency catalog and locale table.

The catalog is maintained locally; no backend call is needed to list currencies.
"""

from typing import Dict, List, Set, Tuple

BASE_CURRENCY = "USD"
DEFAULT_LOCALE = "en-US"

# (code, name, symbol, flag)
CURRENCY_CATALOG: List[Tuple[str, str, str, str]] = [
    ("USD", "US Dollar", "$", "🇺🇸"),
    ("EUR", "Euro", "€", "🇪🇺"),
    ("GBP", "British Pound", "£", "🇬🇧"),
    ("JPY", "Japanese Yen", "¥", "🇯🇵"),
    ("AUD", "Australian Dollar", "A$", "🇦🇺"),
    ("CAD", "Canadian Dollar", "C$", "🇨🇦"),
    ("CHF", "Swiss Franc", "CHF", "🇨🇭"),
    ("CNY", "Chinese Yuan", "¥", "🇨🇳"),
    ("INR", "Indian Rupee", "₹", "🇮🇳"),
    ("PKR", "Pakistani Rupee", "₨", "🇵🇰"),
    ("SGD", "Singapore Dollar", "S$", "🇸🇬"),
    ("HKD", "Hong Kong Dollar", "HK$", "🇭🇰"),
    ("NZD", "New Zealand Dollar", "NZ$", "🇳🇿"),
    ("SEK", "Swedish Krona", "kr", "🇸🇪"),
    ("NOK", "Norwegian Krone", "kr", "🇳🇴"),
    ("DKK", "Danish Krone", "kr", "🇩🇰"),
    ("PLN", "Polish Zloty", "zł", "🇵🇱"),
    ("MXN", "Mexican Peso", "$", "🇲🇽"),
    ("BRL", "Brazilian Real", "R$", "🇧🇷"),
    ("ZAR", "South African Rand", "R", "🇿🇦"),
    ("KRW", "South Korean Won", "₩", "🇰🇷"),
    ("THB", "Thai Baht", "฿", "🇹🇭"),
    ("MYR", "Malaysian Ringgit", "RM", "🇲🇾"),
    ("IDR", "Indonesian Rupiah", "Rp", "🇮🇩"),
    ("PHP", "Philippine Peso", "₱", "🇵🇭"),
    ("AED", "UAE Dirham", "د.إ", "🇦🇪"),
    ("SAR", "Saudi Riyal", "﷼", "🇸🇦"),
    ("ILS", "Israeli Shekel", "₪", "🇮🇱"),
    ("TRY", "Turkish Lira", "₺", "🇹🇷"),
    ("RUB", "Russian Ruble", "₽", "🇷🇺"),
]

CURRENCIES: Set[str] = {code for code, *_ in CURRENCY_CATALOG}

# Currency code -> locale tag used for grouping. Anything missing uses DEFAULT_LOCALE.
LOCALE_BY_CURRENCY: Dict[str, str] = {
    "USD": "en-US",
    "EUR": "en-IE",
    "GBP": "en-GB",
    "JPY": "ja-JP",
    "INR": "en-IN",
    "PKR": "en-PK",
    "CNY": "zh-CN",
    "AUD": "en-AU",
    "CAD": "en-CA",
}

# Locale tag -> (group separator, decimal separator, lakh grouping)
LOCALE_CONVENTIONS: Dict[str, Tuple[str, str, bool]] = {
    "en-US": (",", ".", False),
    "en-IE": (",", ".", False),
    "en-GB": (",", ".", False),
    "ja-JP": (",", ".", False),
    "en-IN": (",", ".", True),
    "en-PK": (",", ".", False),
    "zh-CN": (",", ".", False),
    "en-AU": (",", ".", False),
    "en-CA": (",", ".", False),
    "de-DE": (".", ",", False),
}

ABBREVIATION_THRESHOLD = 100_000
