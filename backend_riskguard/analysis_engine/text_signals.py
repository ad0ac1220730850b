"""
Signal analyzers for text-shaped events: OTP messages, URLs, phishing content.

Same contract as signals.py: analyzer(event, context, weights) -> RiskContribution.
Prose (message bodies, subjects) is matched at word starts through
patterns.py; URLs are parsed with urllib and host checks are anchored on the
hostname, so "t.co" never matches "microsoft.com".
"""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass
from typing import Any
from urllib.parse import SplitResult, parse_qsl, urlsplit

from backend_riskguard.analysis_engine.models import HistoricalContext, MessageChannel, RiskContribution
from backend_riskguard.analysis_engine.patterns import (
    KeywordCategory,
    ScoreTier,
    TextSignature,
    contains_any,
    first_tier,
    matched_phrases,
    score_categories,
    score_signatures,
)
from backend_riskguard.analysis_engine.signals import make_contribution

DIMENSION_SENDER = "sender"
DIMENSION_OTP_CODE = "otp_code"
DIMENSION_CONTENT = "content"
DIMENSION_CONTEXT = "context"
DIMENSION_PHISHING = "phishing"
DIMENSION_SPOOFING = "spoofing"
DIMENSION_DOMAIN = "domain"
DIMENSION_STRUCTURE = "structure"
DIMENSION_REPUTATION = "reputation"
DIMENSION_TECHNICAL = "technical"
DIMENSION_SOCIAL_ENGINEERING = "social_engineering"
DIMENSION_LINKS = "links"

URL_IN_TEXT = re.compile(r"https?://[^\s]+", re.IGNORECASE)
HOMOGRAPH_CHARS = re.compile(r"[\u0370-\u03ff\u0400-\u04ff]")
PUNYCODE_LABEL = "xn--"
LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})

_COMMON_MISSPELLINGS = r"\b(recieve|occured|seperate|definately)\b"


# -----------------------------------------------------------------------------
# URL helpers
# -----------------------------------------------------------------------------


def split_url(url: str) -> SplitResult | None:
    """Parse an absolute URL; None when there is no scheme or host."""
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return None
    if not parts.scheme or not parts.hostname:
        return None
    return parts


def url_host(url: str) -> str:
    parts = split_url(url)
    return parts.hostname.lower() if parts is not None else ""


def host_matches(host: str, domain: str) -> bool:
    """True when host is domain itself or one of its subdomains."""
    domain = domain.lower().lstrip(".")
    return host == domain or host.endswith("." + domain)


def is_ip_host(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def has_homograph(text: str) -> bool:
    """Cyrillic or Greek letters, or an IDN (punycode) label."""
    return bool(HOMOGRAPH_CHARS.search(text)) or PUNYCODE_LABEL in text.lower()


def extract_urls(text: str) -> list[str]:
    return URL_IN_TEXT.findall(text or "")


def is_plain_http(parts: SplitResult) -> bool:
    return parts.scheme.lower() == "http" and (parts.hostname or "").lower() not in LOCAL_HOSTS


# -----------------------------------------------------------------------------
# OTP
# -----------------------------------------------------------------------------

BANK_BRANDS = ("HDFC", "ICICI", "SBI", "AXIS")
ECOMMERCE_BRANDS = ("AMAZON", "FLIPKART")


@dataclass(frozen=True)
class SenderWeights:
    blocked_score: float = 50.0
    min_length: int = 6
    short_score: float = 20.0
    random_pattern: str = r"^[A-Z]{6}$"
    random_score: float = 15.0
    known_senders: tuple[str, ...] = (
        "HDFC", "ICICI", "SBI", "AXIS", "KOTAK",
        "AMAZON", "FLIPKART", "PAYTM", "GPAY",
        "UBER", "OLA", "SWIGGY", "ZOMATO",
    )
    known_score: float = -20.0
    unknown_score: float = 10.0
    spoof_patterns: tuple[str, ...] = (r"HDFC.*BANK", r"SBI.*BANK", r"AMAZON.*INDIA", r"GOOGLE.*PAY")
    verified_sender_ids: tuple[str, ...] = ("HDFCBK", "HDFCBANK", "SBIBNK", "SBIBANK", "SBIINB", "AMAZON", "AMAZONIN", "GPAY")
    spoof_score: float = 25.0


def analyze_sender(event: Any, context: HistoricalContext, weights: SenderWeights) -> RiskContribution:
    """Sender ID checks: blocklist, format, known senders, spoofing patterns."""
    sender = event.sender.strip()
    upper = sender.upper()
    score = 0.0
    reasons: list[str] = []

    blocked = {identifier.strip().upper() for identifier in context.blocked_identifiers}
    if upper in blocked:
        score += weights.blocked_score
        reasons.append("Sender is in blocked list")

    if len(sender) < weights.min_length:
        score += weights.short_score
        reasons.append("Suspicious short sender ID")

    if re.match(weights.random_pattern, sender):
        score += weights.random_score
        reasons.append("Random alphabetic sender pattern")

    if any(known in upper for known in weights.known_senders):
        score += weights.known_score
    else:
        score += weights.unknown_score
        reasons.append("Unknown sender")

    if upper not in weights.verified_sender_ids:
        for pattern in weights.spoof_patterns:
            if re.search(pattern, sender, re.IGNORECASE):
                score += weights.spoof_score
                reasons.append("Potential sender spoofing")

    return make_contribution(DIMENSION_SENDER, score, reasons)


@dataclass(frozen=True)
class OtpCodeWeights:
    code_pattern: str = r"\b\d{4,8}\b"
    missing_score: float = 30.0
    repeated_digits_score: float = 10.0
    sequential_run: int = 4
    sequential_score: float = 15.0
    expected_min_length: int = 4
    expected_max_length: int = 8
    length_score: float = 15.0


def extract_otp_code(message: str, pattern: str = r"\b\d{4,8}\b") -> str | None:
    match = re.search(pattern, message)
    return re.sub(r"\D", "", match.group(0)) if match else None


def has_ascending_run(digits: str, run: int) -> bool:
    """True when `run` consecutive digits each increase by one (e.g. 1234)."""
    streak = 1
    for previous, current in zip(digits, digits[1:]):
        streak = streak + 1 if int(current) == int(previous) + 1 else 1
        if streak >= run:
            return True
    return False


def analyze_otp_code(event: Any, context: HistoricalContext, weights: OtpCodeWeights) -> RiskContribution:
    code = extract_otp_code(event.message, weights.code_pattern)
    if code is None:
        return make_contribution(DIMENSION_OTP_CODE, weights.missing_score, ["No valid OTP code found"])

    score = 0.0
    reasons: list[str] = []
    if not weights.expected_min_length <= len(code) <= weights.expected_max_length:
        score += weights.length_score
        reasons.append("Unusual OTP code length")
    if re.search(r"(\d)\1{2,}", code):
        score += weights.repeated_digits_score
        reasons.append("Repeated digits in OTP")
    if has_ascending_run(code, weights.sequential_run):
        score += weights.sequential_score
        reasons.append("Sequential digits in OTP")
    return make_contribution(DIMENSION_OTP_CODE, score, reasons)


@dataclass(frozen=True)
class OtpContentWeights:
    security_phrases: tuple[str, ...] = (
        "do not share", "confidential", "expires in", "valid for",
        "one time password", "verification code", "security code",
    )
    missing_security_score: float = 20.0
    suspicious: KeywordCategory = KeywordCategory(
        "Suspicious content",
        (
            "click here", "download app", "install now",
            "urgent action", "account suspended", "verify immediately",
            "congratulations", "winner", "prize",
        ),
        15.0,
    )
    url_score: float = 25.0
    grammar: tuple[TextSignature, ...] = (
        TextSignature("Poor grammar/spelling: misspelled word", _COMMON_MISSPELLINGS, 5.0),
        TextSignature("Poor grammar/spelling: repeated periods", r"\.{2,}", 5.0),
        TextSignature("Poor grammar/spelling: repeated exclamation marks", r"!{3,}", 5.0),
    )


def analyze_otp_content(event: Any, context: HistoricalContext, weights: OtpContentWeights) -> RiskContribution:
    message = event.message
    score = 0.0
    reasons: list[str] = []

    if not contains_any(message, weights.security_phrases):
        score += weights.missing_security_score
        reasons.append("Missing security warnings")

    phrase_score, phrase_reasons = score_categories(message, (weights.suspicious,))
    score += phrase_score
    reasons.extend(phrase_reasons)

    if URL_IN_TEXT.search(message):
        score += weights.url_score
        reasons.append("Contains suspicious URLs")

    grammar_score, grammar_reasons = score_signatures(message, weights.grammar)
    score += grammar_score
    reasons.extend(grammar_reasons)

    return make_contribution(DIMENSION_CONTENT, score, reasons)


@dataclass(frozen=True)
class OtpContextWeights:
    bank_senders: tuple[str, ...] = BANK_BRANDS
    bank_vocabulary: tuple[str, ...] = ("bank", "account", "transaction")
    bank_mismatch_score: float = 15.0
    ecommerce_senders: tuple[str, ...] = ECOMMERCE_BRANDS
    ecommerce_vocabulary: tuple[str, ...] = ("order", "delivery", "purchase")
    ecommerce_mismatch_score: float = 10.0


def analyze_otp_context(event: Any, context: HistoricalContext, weights: OtpContextWeights) -> RiskContribution:
    """Message vocabulary that does not fit the claimed sender's business."""
    upper = event.sender.upper()
    message = event.message
    score = 0.0
    reasons: list[str] = []

    if any(brand in upper for brand in weights.bank_senders) and not contains_any(message, weights.bank_vocabulary):
        score += weights.bank_mismatch_score
        reasons.append("Context mismatch for bank sender")

    if (
        any(brand in upper for brand in weights.ecommerce_senders)
        and not contains_any(message, weights.ecommerce_vocabulary)
    ):
        score += weights.ecommerce_mismatch_score
        reasons.append("Context mismatch for e-commerce sender")

    return make_contribution(DIMENSION_CONTEXT, score, reasons)


@dataclass(frozen=True)
class PhishingPhraseWeights:
    phrases: tuple[str, ...] = (
        "click link", "verify account", "update details",
        "confirm identity", "suspended account", "urgent action",
        "download app", "install application",
    )
    score: float = 30.0


def analyze_phishing_phrases(event: Any, context: HistoricalContext, weights: PhishingPhraseWeights) -> RiskContribution:
    found = matched_phrases(event.message, weights.phrases)
    if not found:
        return make_contribution(DIMENSION_PHISHING, 0.0, [])
    return make_contribution(DIMENSION_PHISHING, weights.score, [f'Phishing attempt detected: "{found[0]}"'])


@dataclass(frozen=True)
class SpoofingWeights:
    brands: tuple[str, ...] = ("HDFC", "ICICI", "SBI", "AMAZON", "GOOGLE")
    legitimate_suffixes: tuple[str, ...] = ("BK", "BANK", "IN")
    score: float = 35.0


def analyze_spoofing(event: Any, context: HistoricalContext, weights: SpoofingWeights) -> RiskContribution:
    """Brand embedded in the sender ID with an unexpected modifier."""
    sender = event.sender.strip().upper()
    for brand in weights.brands:
        if brand in sender and sender != brand:
            variations = {brand + suffix for suffix in weights.legitimate_suffixes}
            if sender not in variations:
                return make_contribution(
                    DIMENSION_SPOOFING,
                    weights.score,
                    [f"Sender spoofing detected: {brand} impersonation"],
                )
    return make_contribution(DIMENSION_SPOOFING, 0.0, [])


# -----------------------------------------------------------------------------
# URL
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class DomainWeights:
    invalid_score: float = 30.0
    scam_patterns: tuple[str, ...] = (
        "secure-bank", "paypal-security", "amazon-update", "microsoft-support",
        "apple-verification", "google-security", "facebook-security", "instagram-verify",
    )
    scam_pattern_score: float = 40.0
    suspicious_tlds: tuple[str, ...] = (".tk", ".ml", ".ga", ".cf", ".click", ".download", ".loan")
    tld_score: float = 25.0
    homograph_score: float = 35.0
    max_subdomain_levels: int = 2
    subdomain_score: float = 15.0
    host_keywords: tuple[str, ...] = ("secure", "verify", "update", "confirm", "login", "account")
    keyword_score: float = 10.0
    new_domain_days: int = 30
    new_domain_score: float = 20.0


def analyze_domain(event: Any, context: HistoricalContext, weights: DomainWeights) -> RiskContribution:
    """Host-level checks; an unparsable URL stops here with a fixed penalty."""
    parts = split_url(event.url)
    if parts is None:
        return make_contribution(DIMENSION_DOMAIN, weights.invalid_score, ["Invalid URL format"])

    host = parts.hostname.lower()
    score = 0.0
    reasons: list[str] = []

    for pattern in weights.scam_patterns:
        if pattern in host:
            score += weights.scam_pattern_score
            reasons.append(f"Suspicious domain pattern: {pattern}")

    for tld in weights.suspicious_tlds:
        if host.endswith(tld):
            score += weights.tld_score
            reasons.append(f"Suspicious TLD: {tld}")

    if has_homograph(host):
        score += weights.homograph_score
        reasons.append("Potential homograph attack (non-Latin characters)")

    if not is_ip_host(host) and len(host.split(".")) - 2 > weights.max_subdomain_levels:
        score += weights.subdomain_score
        reasons.append("Excessive subdomains detected")

    for keyword in weights.host_keywords:
        if keyword in host:
            score += weights.keyword_score
            reasons.append(f"Suspicious keyword in domain: {keyword}")

    if context.domain_age_days is not None and context.domain_age_days < weights.new_domain_days:
        score += weights.new_domain_score
        reasons.append("Recently registered domain")

    return make_contribution(DIMENSION_DOMAIN, score, reasons)


@dataclass(frozen=True)
class StructureWeights:
    shorteners: tuple[str, ...] = ("bit.ly", "tinyurl.com", "t.co", "goo.gl", "short.link", "ow.ly")
    shortener_score: float = 20.0
    redirect_params: tuple[str, ...] = ("redirect", "goto", "url", "link", "next", "continue")
    redirect_score: float = 15.0
    ip_host_score: float = 30.0
    max_length: int = 100
    length_score: float = 10.0
    unsafe_chars: str = r"[<>{}|\\^`\[\]]"
    unsafe_score: float = 15.0
    plain_http_score: float = 10.0


def analyze_structure(event: Any, context: HistoricalContext, weights: StructureWeights) -> RiskContribution:
    url = event.url.strip()
    parts = split_url(url)
    score = 0.0
    reasons: list[str] = []

    host = parts.hostname.lower() if parts is not None else ""
    for shortener in weights.shorteners:
        if host and host_matches(host, shortener):
            score += weights.shortener_score
            reasons.append(f"URL shortener detected: {shortener}")

    query = parts.query if parts is not None else ""
    params = {name.lower() for name, _ in parse_qsl(query, keep_blank_values=True)}
    for param in weights.redirect_params:
        if param in params:
            score += weights.redirect_score
            reasons.append(f"Suspicious parameter: {param}")

    if host and is_ip_host(host):
        score += weights.ip_host_score
        reasons.append("IP address instead of domain name")

    if len(url) > weights.max_length:
        score += weights.length_score
        reasons.append("Unusually long URL")

    # IPv6 literals legitimately use brackets in the netloc
    tail = (parts.path + parts.query + parts.fragment) if parts is not None else url
    if re.search(weights.unsafe_chars, tail):
        score += weights.unsafe_score
        reasons.append("Suspicious characters in URL")

    if parts is not None and is_plain_http(parts):
        score += weights.plain_http_score
        reasons.append("Non-HTTPS URL")

    return make_contribution(DIMENSION_STRUCTURE, score, reasons)


@dataclass(frozen=True)
class ReputationWeights:
    verified_scam_score: float = 50.0
    report_tiers: tuple[ScoreTier, ...] = (
        ScoreTier(10, 30, "High number of user reports"),
        ScoreTier(5, 20, "Multiple user reports"),
        ScoreTier(0, 10, "User reports"),
    )
    trusted_domains: tuple[str, ...] = ("paypal.com", "amazon.com", "microsoft.com", "apple.com", "google.com")
    trusted_score: float = -20.0
    poor_reputation_score: float = 15.0


def analyze_reputation(event: Any, context: HistoricalContext, weights: ReputationWeights) -> RiskContribution:
    """Caller-supplied reputation data: scam database, user reports, trusted sites."""
    url = event.url.strip()
    host = url_host(url)
    score = 0.0
    reasons: list[str] = []

    if url in context.verified_scam_urls or (host and host in context.verified_scam_urls):
        score += weights.verified_scam_score
        reasons.append("URL in verified scam database")

    tier = first_tier(context.url_report_count, weights.report_tiers)
    if tier is not None:
        score += tier.score
        reasons.append(f"{tier.reason}: {context.url_report_count}")

    trusted = set(weights.trusted_domains) | set(context.trusted_domains)
    if host and any(host_matches(host, domain) for domain in trusted):
        score += weights.trusted_score
        reasons.append("Domain in trusted sites list")

    if context.poor_domain_reputation:
        score += weights.poor_reputation_score
        reasons.append("Poor domain reputation")

    return make_contribution(DIMENSION_REPUTATION, score, reasons)


@dataclass(frozen=True)
class UrlTechnicalWeights:
    file_extensions: tuple[str, ...] = (".exe", ".scr", ".bat", ".com", ".pif", ".zip", ".rar")
    extension_score: float = 25.0
    encoding_score: float = 15.0
    suspicious_ports: tuple[int, ...] = (8080, 3000, 8000, 8888)
    port_score: float = 10.0


def analyze_url_technical(event: Any, context: HistoricalContext, weights: UrlTechnicalWeights) -> RiskContribution:
    """Downloadable file on the path, percent-encoding, development ports."""
    url = event.url.strip()
    parts = split_url(url)
    score = 0.0
    reasons: list[str] = []

    path = (parts.path if parts is not None else "").lower()
    for extension in weights.file_extensions:
        if path.endswith(extension):
            score += weights.extension_score
            reasons.append(f"Suspicious file extension: {extension}")

    if re.search(r"%[0-9a-fA-F]{2}", url):
        score += weights.encoding_score
        reasons.append("URL encoding detected")

    if parts is not None:
        try:
            port = parts.port
        except ValueError:
            port = None
        if port in weights.suspicious_ports:
            score += weights.port_score
            reasons.append(f"Suspicious port: {port}")

    return make_contribution(DIMENSION_TECHNICAL, score, reasons)


@dataclass(frozen=True)
class UrlSocialWeights:
    keywords: tuple[str, ...] = (
        "urgent", "verify", "suspend", "expire", "confirm", "update",
        "security", "alert", "warning", "action", "required", "immediate",
    )
    keyword_score: float = 8.0
    brands: tuple[str, ...] = ("paypal", "amazon", "microsoft", "apple", "google", "facebook")
    brand_score: float = 20.0


def analyze_url_social(event: Any, context: HistoricalContext, weights: UrlSocialWeights) -> RiskContribution:
    url = event.url.strip()
    lowered = url.lower()
    host = url_host(url)
    score = 0.0
    reasons: list[str] = []

    for keyword in weights.keywords:
        if keyword in lowered:
            score += weights.keyword_score
            reasons.append(f"Social engineering keyword: {keyword}")

    for brand in weights.brands:
        if brand in lowered and not host_matches(host, f"{brand}.com"):
            score += weights.brand_score
            reasons.append(f"Potential brand impersonation: {brand}")

    return make_contribution(DIMENSION_SOCIAL_ENGINEERING, score, reasons)


# -----------------------------------------------------------------------------
# Phishing content
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class LinkWeights:
    suspicious_domains: tuple[str, ...] = (
        "bit.ly", "tinyurl.com", "short.link", "click.me", "go.link",
        "secure-bank.com", "paypal-security.com", "amazon-update.com",
    )
    suspicious_domain_score: float = 25.0
    shorteners: tuple[str, ...] = ("bit.ly", "tinyurl.com", "short.link", "t.co", "goo.gl")
    shortener_score: float = 15.0
    ip_host_score: float = 20.0
    homograph_score: float = 30.0
    lure_prefixes: tuple[str, ...] = ("secure-", "verify-", "update-", "confirm-")
    lure_score: float = 15.0
    plain_http_score: float = 10.0


def analyze_links(event: Any, context: HistoricalContext, weights: LinkWeights) -> RiskContribution:
    """Check the submitted URL and every URL found in the content (each once)."""
    candidates = [event.url.strip()] if event.url and event.url.strip() else []
    candidates.extend(extract_urls(event.content))
    urls = list(dict.fromkeys(candidates))

    score = 0.0
    reasons: list[str] = []
    for url in urls:
        parts = split_url(url)
        host = parts.hostname.lower() if parts is not None else ""

        if host and any(host_matches(host, domain) for domain in weights.suspicious_domains):
            score += weights.suspicious_domain_score
            reasons.append(f"Suspicious domain detected: {host}")
        if host and any(host_matches(host, domain) for domain in weights.shorteners):
            score += weights.shortener_score
            reasons.append(f"URL shortener detected: {host}")
        if host and is_ip_host(host):
            score += weights.ip_host_score
            reasons.append("IP address instead of domain")
        if has_homograph(host or url):
            score += weights.homograph_score
            reasons.append("Potential homograph attack")
        if any(prefix in url.lower() for prefix in weights.lure_prefixes):
            score += weights.lure_score
            reasons.append("Suspicious subdomain pattern")
        if parts is not None and is_plain_http(parts):
            score += weights.plain_http_score
            reasons.append("Non-HTTPS URL")

    return make_contribution(DIMENSION_LINKS, score, reasons)


@dataclass(frozen=True)
class PhishingContentWeights:
    categories: tuple[KeywordCategory, ...] = (
        KeywordCategory(
            "Urgency indicator",
            (
                "urgent", "immediate", "expires today", "act now", "limited time",
                "verify now", "confirm immediately", "suspend", "locked", "frozen",
            ),
            8.0,
        ),
        KeywordCategory(
            "Financial threat",
            (
                "account suspended", "payment failed", "card blocked", "unauthorized access",
                "security breach", "verify payment", "update billing", "refund pending",
            ),
            12.0,
        ),
        KeywordCategory(
            "Credential request",
            (
                "login", "password", "username", "pin", "otp", "verification code",
                "security question", "personal information", "ssn", "social security",
            ),
            10.0,
        ),
        KeywordCategory(
            "Brand impersonation",
            (
                "paypal", "amazon", "microsoft", "apple", "google", "facebook",
                "bank of america", "chase", "wells fargo", "irs", "fedex", "ups",
            ),
            15.0,
        ),
    )
    grammar: tuple[TextSignature, ...] = (
        TextSignature("Grammar/spelling issues: misspelled word", r"\b(recieve|occured|seperate|definately|loose)\b", 5.0),
        TextSignature("Grammar/spelling issues: repeated periods", r"\.{2,}", 5.0),
        TextSignature("Grammar/spelling issues: repeated exclamation marks", r"!{2,}", 5.0),
    )


def analyze_phishing_content(event: Any, context: HistoricalContext, weights: PhishingContentWeights) -> RiskContribution:
    score, reasons = score_categories(event.content, weights.categories)
    grammar_score, grammar_reasons = score_signatures(event.content, weights.grammar)
    return make_contribution(DIMENSION_CONTENT, score + grammar_score, reasons + grammar_reasons)


@dataclass(frozen=True)
class MessageSenderWeights:
    missing_score: float = 5.0
    free_providers: tuple[str, ...] = ("gmail.com", "yahoo.com", "hotmail.com", "outlook.com")
    free_provider_score: float = 8.0
    no_reply_pattern: str = r"noreply|no-reply|donotreply"
    no_reply_score: float = 5.0
    digit_run_score: float = 10.0
    short_code_pattern: str = r"^\d{4,6}$"
    short_code_score: float = 5.0
    home_country_prefix: str = "+1"
    international_score: float = 10.0


def analyze_message_sender(event: Any, context: HistoricalContext, weights: MessageSenderWeights) -> RiskContribution:
    """Sender address or number checks, by channel."""
    sender = (event.sender or "").strip()
    if not sender:
        return make_contribution(DIMENSION_SENDER, weights.missing_score, ["No sender information"])

    lowered = sender.lower()
    channel = MessageChannel(event.channel)
    score = 0.0
    reasons: list[str] = []

    if channel is MessageChannel.EMAIL:
        domain = lowered.rsplit("@", 1)[-1]
        if any(host_matches(domain, provider) for provider in weights.free_providers):
            score += weights.free_provider_score
            reasons.append("Free email provider for business communication")
        if re.search(weights.no_reply_pattern, lowered):
            score += weights.no_reply_score
            reasons.append("No-reply sender pattern")
        if re.search(r"\d{3,}", lowered):
            score += weights.digit_run_score
            reasons.append("Random numbers in sender")
    elif channel in (MessageChannel.SMS, MessageChannel.CALL):
        if re.match(weights.short_code_pattern, sender):
            score += weights.short_code_score
            reasons.append("Short code sender")
        if sender.startswith("+") and not sender.startswith(weights.home_country_prefix):
            score += weights.international_score
            reasons.append("International number")

    return make_contribution(DIMENSION_SENDER, score, reasons)


@dataclass(frozen=True)
class SocialEngineeringWeights:
    categories: tuple[KeywordCategory, ...] = (
        KeywordCategory(
            "Fear tactic",
            (
                "account will be closed", "legal action", "police", "arrest", "lawsuit",
                "criminal charges", "investigation", "fraud alert", "security violation",
            ),
            15.0,
        ),
        KeywordCategory(
            "Authority impersonation",
            (
                "irs", "fbi", "police", "government", "tax office", "court",
                "legal department", "security team", "fraud department",
            ),
            20.0,
        ),
        KeywordCategory(
            "Reward scam indicator",
            (
                "congratulations", "winner", "prize", "lottery", "sweepstakes",
                "free gift", "cash reward", "inheritance", "million dollars",
            ),
            12.0,
        ),
        KeywordCategory(
            "Romance scam indicator",
            (
                "lonely", "love", "soulmate", "destiny", "widow", "military",
                "overseas", "emergency", "hospital", "money for travel",
            ),
            10.0,
        ),
    )


def analyze_social_engineering(
    event: Any,
    context: HistoricalContext,
    weights: SocialEngineeringWeights,
) -> RiskContribution:
    text = f"{event.content} {event.subject or ''}"
    score, reasons = score_categories(text, weights.categories)
    return make_contribution(DIMENSION_SOCIAL_ENGINEERING, score, reasons)


@dataclass(frozen=True)
class ContentTechnicalWeights:
    hidden_characters: str = r"[\u200b-\u200d\ufeff]"
    hidden_score: float = 15.0
    attachment_extensions: tuple[str, ...] = (".exe", ".scr", ".bat", ".pif", ".zip", ".rar")
    attachment_score: float = 20.0
    encoded_blob: str = r"[A-Za-z0-9+/]{20,}={0,2}"
    encoded_score: float = 10.0
    script_markers: str = r"<script|javascript:|onclick=|onerror="
    script_score: float = 25.0


def analyze_content_technical(event: Any, context: HistoricalContext, weights: ContentTechnicalWeights) -> RiskContribution:
    """Hidden characters, attachment names, encoded blobs, script injection."""
    content = event.content
    score = 0.0
    reasons: list[str] = []

    if re.search(weights.hidden_characters, content):
        score += weights.hidden_score
        reasons.append("Hidden characters detected")

    for extension in weights.attachment_extensions:
        if re.search(re.escape(extension) + r"\b", content, re.IGNORECASE):
            score += weights.attachment_score
            reasons.append(f"Suspicious attachment: {extension}")

    if re.search(weights.encoded_blob, content):
        score += weights.encoded_score
        reasons.append("Base64 encoded content detected")

    if re.search(weights.script_markers, content, re.IGNORECASE):
        score += weights.script_score
        reasons.append("Script injection detected")

    return make_contribution(DIMENSION_TECHNICAL, score, reasons)
