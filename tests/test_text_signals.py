"""
Pytest tests for text signal analyzers: OTP messages, URLs, phishing content.
"""

from __future__ import annotations

import pytest

from backend_riskguard.analysis_engine import text_signals as t
from backend_riskguard.analysis_engine.models import (
    EMPTY_CONTEXT,
    HistoricalContext,
    MessageChannel,
    OtpMessage,
    PhishingSubmission,
    UrlSubmission,
)

from conftest import DAYTIME

LEGIT_OTP = "Your OTP is 482913 for transaction at HDFC Bank. Valid for 10 minutes. Do not share with anyone."
FAKE_OTP = (
    "URGENT ACTION required! Your account suspended. Click here "
    "http://hdfc-verify.tk to verify account"
)


def otp(message: str = LEGIT_OTP, sender: str = "HDFCBK") -> OtpMessage:
    return OtpMessage(message=message, sender=sender, timestamp=DAYTIME)


def url(value: str) -> UrlSubmission:
    return UrlSubmission(url=value, timestamp=DAYTIME)


def message(content: str, **overrides) -> PhishingSubmission:
    return PhishingSubmission(content=content, timestamp=DAYTIME, **overrides)


# --- URL helpers ---


def test_host_matching_is_anchored():
    assert t.host_matches("t.co", "t.co")
    assert t.host_matches("news.t.co", "t.co")
    assert not t.host_matches("www.microsoft.com", "t.co")
    assert not t.host_matches("paypal.com.evil.ru", "paypal.com")


@pytest.mark.parametrize(
    "value,host",
    [
        ("https://www.google.com/search?q=weather", "www.google.com"),
        ("HTTP://Example.ORG:8080/x", "example.org"),
        ("not a url", ""),
        ("www.example.com/no-scheme", ""),
    ],
)
def test_url_host(value, host):
    assert t.url_host(value) == host


def test_ip_hosts_and_homographs():
    assert t.is_ip_host("192.168.1.10")
    assert t.is_ip_host("::1")
    assert not t.is_ip_host("example.com")
    assert t.has_homograph("\u0430pple.com")
    assert t.has_homograph("xn--pple-43d.com")
    assert not t.has_homograph("apple.com")


def test_extract_urls_from_text():
    text = "Go to https://a.example/x now, or http://b.example."
    assert t.extract_urls(text) == ["https://a.example/x", "http://b.example."]
    assert t.extract_urls("") == []


def test_otp_code_helpers():
    assert t.extract_otp_code(LEGIT_OTP) == "482913"
    assert t.extract_otp_code("no digits here") is None
    assert t.has_ascending_run("9123458", 4)
    assert not t.has_ascending_run("482913", 4)


# --- OTP ---


def test_verified_sender_scores_nothing():
    c = t.analyze_sender(otp(), EMPTY_CONTEXT, t.SenderWeights())
    # Known brand credit floors the score at zero
    assert c.score == 0
    assert c.reasons == ("Random alphabetic sender pattern",)


def test_spoofed_and_short_senders():
    c = t.analyze_sender(otp(sender="HDFC-BANK"), EMPTY_CONTEXT, t.SenderWeights())
    assert c.score == 5
    assert c.reasons == ("Potential sender spoofing",)

    c = t.analyze_sender(otp(sender="AB12"), EMPTY_CONTEXT, t.SenderWeights())
    assert c.score == 30
    assert c.reasons == ("Suspicious short sender ID", "Unknown sender")


def test_blocked_sender_is_case_insensitive():
    ctx = HistoricalContext(blocked_identifiers=frozenset({"hdfc-bank"}))
    c = t.analyze_sender(otp(sender="HDFC-BANK"), ctx, t.SenderWeights())
    assert c.score == 55
    assert c.reasons[0] == "Sender is in blocked list"


def test_otp_code_checks():
    w = t.OtpCodeWeights()
    assert t.analyze_otp_code(otp(), EMPTY_CONTEXT, w).score == 0
    c = t.analyze_otp_code(otp(message="Your code is 111234"), EMPTY_CONTEXT, w)
    assert c.score == 25
    assert c.reasons == ("Repeated digits in OTP", "Sequential digits in OTP")
    c = t.analyze_otp_code(otp(message=FAKE_OTP), EMPTY_CONTEXT, w)
    assert c.score == 30
    assert c.reasons == ("No valid OTP code found",)


def test_otp_content_on_fake_message():
    c = t.analyze_otp_content(otp(message=FAKE_OTP), EMPTY_CONTEXT, t.OtpContentWeights())
    # missing warnings 20, three suspicious phrases 45, embedded URL 25
    assert c.score == 90
    assert c.reasons[0] == "Missing security warnings"
    assert 'Suspicious content: "click here"' in c.reasons
    assert "Contains suspicious URLs" in c.reasons
    assert t.analyze_otp_content(otp(), EMPTY_CONTEXT, t.OtpContentWeights()).score == 0


def test_otp_content_grammar_signatures():
    c = t.analyze_otp_content(
        otp(message="Do not share 482913... you will recieve a prize!!!"),
        EMPTY_CONTEXT,
        t.OtpContentWeights(),
    )
    assert "Poor grammar/spelling: misspelled word" in c.reasons
    assert "Poor grammar/spelling: repeated periods" in c.reasons
    assert "Poor grammar/spelling: repeated exclamation marks" in c.reasons


def test_otp_context_mismatch():
    w = t.OtpContextWeights()
    assert t.analyze_otp_context(otp(), EMPTY_CONTEXT, w).score == 0
    c = t.analyze_otp_context(otp(message="Code 482913. Do not share.", sender="AMAZON"), EMPTY_CONTEXT, w)
    assert c.score == 10
    c = t.analyze_otp_context(otp(message="Code 482913. Do not share."), EMPTY_CONTEXT, w)
    assert c.reasons == ("Context mismatch for bank sender",)


def test_phishing_phrases_score_once():
    c = t.analyze_phishing_phrases(otp(message=FAKE_OTP), EMPTY_CONTEXT, t.PhishingPhraseWeights())
    assert c.score == 30
    assert c.reasons == ('Phishing attempt detected: "verify account"',)


@pytest.mark.parametrize(
    "sender,score",
    [("HDFCBK", 0), ("HDFC", 0), ("HDFCBANK", 0), ("HDFC-BANK", 35), ("AMAZON-PAY", 35), ("SWIGGY", 0)],
)
def test_spoofing(sender, score):
    assert t.analyze_spoofing(otp(sender=sender), EMPTY_CONTEXT, t.SpoofingWeights()).score == score


# --- URL ---


def test_domain_checks():
    w = t.DomainWeights()
    c = t.analyze_domain(url("not a url"), EMPTY_CONTEXT, w)
    assert c.score == 30
    assert c.reasons == ("Invalid URL format",)

    c = t.analyze_domain(url("http://paypal-security.secure-login.tk/verify"), EMPTY_CONTEXT, w)
    # scam pattern 40, .tk 25, "secure" 10, "login" 10
    assert c.score == 85
    assert "Suspicious TLD: .tk" in c.reasons

    assert t.analyze_domain(url("https://a.b.c.example.com/"), EMPTY_CONTEXT, w).score == 15
    assert t.analyze_domain(url("https://example.com/"), HistoricalContext(domain_age_days=3), w).score == 20


def test_structure_checks():
    w = t.StructureWeights()
    assert t.analyze_structure(url("https://www.microsoft.com/en-us"), EMPTY_CONTEXT, w).score == 0
    assert t.analyze_structure(url("https://t.co/abc"), EMPTY_CONTEXT, w).score == 20

    c = t.analyze_structure(url("http://192.168.1.10:8080/login.exe"), EMPTY_CONTEXT, w)
    assert c.score == 40
    assert c.reasons == ("IP address instead of domain name", "Non-HTTPS URL")

    c = t.analyze_structure(url("https://example.com/?next=/home&q=1"), EMPTY_CONTEXT, w)
    assert c.reasons == ("Suspicious parameter: next",)
    # "url" in the path is not a query parameter
    assert t.analyze_structure(url("https://example.com/url-guide"), EMPTY_CONTEXT, w).score == 0
    assert t.analyze_structure(url("https://example.com/a<b>"), EMPTY_CONTEXT, w).score == 15
    assert t.analyze_structure(url("http://localhost:3000/"), EMPTY_CONTEXT, w).score == 0


def test_reputation_uses_context():
    w = t.ReputationWeights()
    target = "https://bad.example/win"
    ctx = HistoricalContext(
        verified_scam_urls=frozenset({target}),
        url_report_count=6,
        poor_domain_reputation=True,
    )
    c = t.analyze_reputation(url(target), ctx, w)
    assert c.score == 85
    assert c.reasons == (
        "URL in verified scam database",
        "Multiple user reports: 6",
        "Poor domain reputation",
    )

    c = t.analyze_reputation(url("https://docs.internal.example/"), HistoricalContext(trusted_domains=frozenset({"internal.example"})), w)
    assert c.score == 0
    assert c.reasons == ("Domain in trusted sites list",)


def test_url_technical():
    w = t.UrlTechnicalWeights()
    c = t.analyze_url_technical(url("http://192.168.1.10:8080/login.exe"), EMPTY_CONTEXT, w)
    assert c.score == 35
    assert c.reasons == ("Suspicious file extension: .exe", "Suspicious port: 8080")
    # A .com host is not a file extension
    assert t.analyze_url_technical(url("https://example.com"), EMPTY_CONTEXT, w).score == 0
    assert t.analyze_url_technical(url("https://example.com/a%20b"), EMPTY_CONTEXT, w).score == 15


def test_url_social_engineering():
    w = t.UrlSocialWeights()
    assert t.analyze_url_social(url("https://www.google.com/search?q=weather"), EMPTY_CONTEXT, w).score == 0
    c = t.analyze_url_social(url("https://paypal.com.account-update.example/"), EMPTY_CONTEXT, w)
    assert c.score == 28
    assert c.reasons == ("Social engineering keyword: update", "Potential brand impersonation: paypal")


# --- Phishing content ---


def test_links_are_deduplicated():
    link = "http://secure-paypal.com.verify-login.ru/update"
    event = message(f"Update here: {link} or {link}", url=link)
    c = t.analyze_links(event, EMPTY_CONTEXT, t.LinkWeights())
    # lure prefix 15 and plain http 10, counted once for the single distinct URL
    assert c.score == 25
    assert c.reasons == ("Suspicious subdomain pattern", "Non-HTTPS URL")


def test_links_shortener_and_ip():
    event = message("See https://bit.ly/x and http://10.0.0.5/pay")
    c = t.analyze_links(event, EMPTY_CONTEXT, t.LinkWeights())
    assert "Suspicious domain detected: bit.ly" in c.reasons
    assert "URL shortener detected: bit.ly" in c.reasons
    assert "IP address instead of domain" in c.reasons


def test_phishing_content_word_start_matching():
    w = t.PhishingContentWeights()
    assert t.analyze_phishing_content(message("Meet me at the shopping mall"), EMPTY_CONTEXT, w).score == 0
    c = t.analyze_phishing_content(message("Your PIN is needed, account suspended"), EMPTY_CONTEXT, w)
    assert 'Credential request: "pin"' in c.reasons
    assert 'Financial threat: "account suspended"' in c.reasons
    assert 'Urgency indicator: "suspend"' in c.reasons


def test_message_sender_by_channel():
    w = t.MessageSenderWeights()
    assert t.analyze_message_sender(message("hi"), EMPTY_CONTEXT, w).reasons == ("No sender information",)
    assert t.analyze_message_sender(message("hi", sender="alice@company.com"), EMPTY_CONTEXT, w).score == 0
    c = t.analyze_message_sender(message("hi", sender="security-alert123@gmail.com"), EMPTY_CONTEXT, w)
    assert c.score == 18
    sms = message("hi", sender="+447700900123", channel=MessageChannel.SMS)
    c = t.analyze_message_sender(sms, EMPTY_CONTEXT, w)
    assert c.score == 10
    assert c.reasons == ("International number",)
    assert t.analyze_message_sender(message("hi", sender="56767", channel=MessageChannel.SMS), EMPTY_CONTEXT, w).score == 5


def test_social_engineering_reads_subject():
    w = t.SocialEngineeringWeights()
    c = t.analyze_social_engineering(message("Please respond.", subject="You are a winner"), EMPTY_CONTEXT, w)
    assert c.score == 12
    assert c.reasons == ('Reward scam indicator: "winner"',)


def test_content_technical():
    w = t.ContentTechnicalWeights()
    assert t.analyze_content_technical(message("Open invoice.zip now"), EMPTY_CONTEXT, w).score == 20
    assert t.analyze_content_technical(message("Visit example.com today"), EMPTY_CONTEXT, w).score == 0
    assert t.analyze_content_technical(message("hello\u200bworld"), EMPTY_CONTEXT, w).score == 15
    c = t.analyze_content_technical(message("<script>alert(1)</script>"), EMPTY_CONTEXT, w)
    assert c.reasons == ("Script injection detected",)
