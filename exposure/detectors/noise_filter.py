"""
exposure/detectors/noise_filter.py
Business / template detection shared by every extractor.

A blunt lower-cased substring test against marketing, CRM, CV and
mail-merge phrasing. Long pasted templates are the main source of false
names and locations, so extractors skip any message this flags and also
apply their own length ceilings (see *_MAX_LENGTH constants below).
"""

from typing import Tuple

# Case-insensitive substrings. Matching is on the lower-cased text.
BUSINESS_INDICATORS: Tuple[str, ...] = (
    'script', 'email script', 'cold call', 'marketing', 'strategy', 'client',
    'customer', 'sales', 'business', 'service', 'offer', 'prospect', 'gatekeeper',
    'campaign', 'conversion', 'funnel', 'roi', 'lead', 'pipeline', 'CompanyName',
    '{{Name}}', 'Hi {{', 'Dear {{', 'template', 'roofing companies', 'cv',
    'application', 'Good afternoon, Finnian', 'Thank you for sharing your CV',
)

_LOWERED: Tuple[str, ...] = tuple(i.lower() for i in BUSINESS_INDICATORS)

# Length ceilings — messages above these are treated as templates
NAME_MAX_LENGTH    = 800
TOPIC_MAX_LENGTH   = 500    # applies only together with a business hit
MOMENT_MAX_LENGTH  = 600
MOMENT_KEEP_LENGTH = 500


def is_business_context(text: str) -> bool:
    lower = text.lower()
    return any(indicator in lower for indicator in _LOWERED)
