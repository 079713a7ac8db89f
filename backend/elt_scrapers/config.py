"""
Site configurations for all ELT content sources.

Each site has a SiteConfig that defines:
- Base and listing URLs
- Politeness delays
- Exercise caps and CLI aliases
"""

from .base import SiteConfig


BRITISH_COUNCIL_BASE = 'https://learnenglish.britishcouncil.org'


# ============================================================
# SITE CONFIGURATIONS
# ============================================================
# Insertion order is the execution order of a full run.

SITES = {
    'breaking': SiteConfig(
        name='BreakingNewsEnglish',
        key='breaking',
        base_url='https://breakingnewsenglish.com',
        listing_urls={'latest': 'https://breakingnewsenglish.com'},
        min_delay_ms=2000,
        max_delay_ms=5000,
        max_exercises=20,
        aliases=('breakingnews',),
    ),

    # Anti-bot protected: longer pauses
    'britishcouncil': SiteConfig(
        name='BritishCouncil',
        key='britishcouncil',
        base_url=BRITISH_COUNCIL_BASE,
        listing_urls={
            'A1': f'{BRITISH_COUNCIL_BASE}/skills/reading/a1-reading',
            'A2': f'{BRITISH_COUNCIL_BASE}/skills/reading/a2-reading',
            'B1': f'{BRITISH_COUNCIL_BASE}/skills/reading/b1-reading',
            'B2': f'{BRITISH_COUNCIL_BASE}/skills/reading/b2-reading',
            'C1': f'{BRITISH_COUNCIL_BASE}/skills/reading/c1-reading',
        },
        min_delay_ms=3000,
        max_delay_ms=6000,
        max_exercises=10,
        aliases=('british', 'bc'),
    ),
}


# ============================================================
# HELPER FUNCTIONS
# ============================================================

def resolve_site_key(name: str) -> str:
    """
    Resolve a site key or alias to its canonical key.

    Args:
        name: Site key or alias (case-insensitive, e.g. 'bc')

    Returns:
        Canonical site key (e.g. 'britishcouncil')

    Raises:
        ValueError: If name matches no site
    """
    lookup = name.strip().lower()
    for key, config in SITES.items():
        if lookup == key or lookup in config.aliases:
            return key
    raise ValueError(f"Unknown site: '{name}'. Valid sites: {', '.join(list_site_names())}")


def get_site_config(site_key: str) -> SiteConfig:
    """
    Get configuration for a site by its key or alias.

    Raises:
        ValueError: If site_key is not found
    """
    return SITES[resolve_site_key(site_key)]


def get_enabled_sites() -> dict:
    """Get all enabled sites."""
    return {k: v for k, v in SITES.items() if v.enabled}


def list_site_names() -> list:
    """List every accepted site name: keys followed by their aliases."""
    names = []
    for key, config in SITES.items():
        names.append(key)
        names.extend(config.aliases)
    return names


def get_site_summary() -> list:
    """Get a summary of all sites for display."""
    summary = []
    for key, config in SITES.items():
        summary.append({
            'key': key,
            'name': config.name,
            'aliases': list(config.aliases),
            'enabled': config.enabled,
            'url': config.base_url,
        })
    return summary
