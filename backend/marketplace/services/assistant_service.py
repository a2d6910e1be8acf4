import re
from typing import Iterable, List, Sequence

from marketplace.schemas.assistant import AssistantListing, AssistantMessage


MAX_RESULTS = 5

HELP_TEXT = """I can help you find items in the marketplace! Try:
📌 Search for specific items (e.g., "I need a bottle" or "Show me books")
💰 Ask about prices (e.g., "Items under $50" or "Price between $20 and $100")
📁 Browse categories (e.g., "Show categories" or "What categories are available")
🔍 View listings (e.g., "Show available listings")"""

FALLBACK_TEXT = """I can help you find items! Try:
• Searching for specific items (e.g., "Show me bottles")
• Asking about prices (e.g., "Items under $50")
• Browsing categories (e.g., "Show categories")
• Viewing all listings (e.g., "Show available items")"""

_UNDER_RE = re.compile(r"under\s*\$?(\d+)", re.IGNORECASE)
_BETWEEN_RE = re.compile(r"between\s*\$?(\d+)\s*(?:and|to)\s*\$?(\d+)", re.IGNORECASE)
_STOP_WORDS_RE = re.compile(
    r"\b(?:show|me|find|search|for|available|items|listings|need|a|an|the|some|i|want|to|buy)\b",
    re.IGNORECASE,
)


def _format_price(price: float) -> str:
    return str(int(price)) if float(price).is_integer() else repr(float(price))


def _format_listing(listing: AssistantListing) -> str:
    description = (listing.description or "")[:100]
    return f"📌 {listing.title}\n💰 ${_format_price(listing.price)}\n📝 {description}...\n"


def _format_listings(listings: Iterable[AssistantListing]) -> str:
    return "\n".join(_format_listing(listing) for listing in listings)


def _matches(listing: AssistantListing, term: str) -> bool:
    return any(term in (text or "").lower() for text in (listing.title, listing.description, listing.category))


def extract_search_terms(text: str) -> List[str]:
    stripped = _STOP_WORDS_RE.sub(" ", text)
    return [term for term in re.findall(r"\w+", stripped) if len(term) > 2]


class AssistantService:
    """Answers marketplace questions from a fixed rule table over the given listings."""

    def reply(self, messages: Sequence[AssistantMessage], listings: Sequence[AssistantListing]) -> str:
        """
        Pick the first matching rule for the last message:
        help, categories, price range, price ceiling, keyword search,
        recent listings, then a fallback hint.
        """
        if not messages:
            raise ValueError("At least one message is required")
        text = messages[-1].content.lower()

        if "help" in text:
            return HELP_TEXT
        if "category" in text or "categories" in text:
            return self._categories(listings)

        between = _BETWEEN_RE.search(text)
        if between:
            return self._between(listings, int(between.group(1)), int(between.group(2)))
        under = _UNDER_RE.search(text)
        if under:
            return self._under(listings, int(under.group(1)))

        terms = extract_search_terms(text)
        if terms:
            return self._search(listings, terms)
        if "show" in text or "available" in text or "listings" in text:
            return "Here are some recent listings:\n\n" + _format_listings(listings[:MAX_RESULTS])
        return FALLBACK_TEXT

    def _categories(self, listings: Sequence[AssistantListing]) -> str:
        categories = list(dict.fromkeys(listing.category for listing in listings))
        return "Here are the available categories:\n\n" + "\n".join(f"📁 {c}" for c in categories)

    def _between(self, listings: Sequence[AssistantListing], min_price: int, max_price: int) -> str:
        matching = [l for l in listings if min_price <= l.price <= max_price][:MAX_RESULTS]
        if not matching:
            return f"I couldn't find any items between ${min_price} and ${max_price}. Try a different price range."
        return f"Here are items between ${min_price} and ${max_price}:\n\n" + _format_listings(matching)

    def _under(self, listings: Sequence[AssistantListing], max_price: int) -> str:
        matching = [l for l in listings if l.price <= max_price][:MAX_RESULTS]
        if not matching:
            return f"I couldn't find any items under ${max_price}. Try a higher price range."
        return f"Here are items under ${max_price}:\n\n" + _format_listings(matching)

    def _search(self, listings: Sequence[AssistantListing], terms: List[str]) -> str:
        relevant: List[AssistantListing] = []
        seen = set()
        for term in terms:
            for index, listing in enumerate(listings):
                if index not in seen and _matches(listing, term):
                    seen.add(index)
                    relevant.append(listing)
        relevant = relevant[:MAX_RESULTS]
        if not relevant:
            return (
                f"I couldn't find any items matching \"{' '.join(terms)}\". "
                "Try different keywords or browse all listings."
            )
        return "Here are some relevant items:\n\n" + _format_listings(relevant)
