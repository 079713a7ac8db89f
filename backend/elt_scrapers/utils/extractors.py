"""
Data extraction utilities for scrapers.

Each function walks an ordered list of CSS selectors (a fallback chain)
and stops at the first one that yields usable content. Adapters keep
their selector chains as data and pass them in.
"""

import re
from typing import Callable, List, Optional, Sequence, Tuple
from urllib.parse import urldefrag, urljoin

from bs4 import BeautifulSoup, Tag

from .normalizers import clean_text

# Text that marks a paragraph as site chrome rather than teaching content.
BOILERPLATE_PHRASES = (
    '©',
    'copyright',
    'subscribe',
    'click',
    'help this site',
    'log in',
    'sign up',
)

# Link texts that point at navigation rather than content.
NAVIGATION_WORDS = ('next', 'previous', 'home', 'back')

# Titles served by anti-bot / access-denied pages (English only).
BLOCKED_TITLE_PHRASES = ('access denied', 'blocked', 'forbidden')

# Bold words that are never vocabulary.
VOCABULARY_IGNORE_WORDS = (
    'level', 'january', 'february', 'march', 'april', 'may', 'june',
    'july', 'august', 'september', 'october', 'november', 'december',
    'sources', 'news', 'rssfeed', 'rss', 'feed', 'http', 'www', 'com',
    'org', 'net', 'esl', 'efl', 'pdf', 'mp3', 'quiz', 'quizzes',
    'easier', 'harder', 'buy', 'click', 'subscribe', 'copyright',
    'help', 'home', 'back', 'next', 'previous', 'facebook', 'twitter',
    'linkedin', 'email', 'share', 'print', 'download',
)

MAX_OPTIONS = 4


def _contains_phrase(text: str, phrase: str) -> bool:
    # Word phrases match whole words only; symbols like '©' match anywhere
    if phrase[:1].isalnum() and phrase[-1:].isalnum():
        return re.search(r'\b' + re.escape(phrase) + r'\b', text, re.IGNORECASE) is not None
    return phrase.lower() in text.lower()


def is_boilerplate(text: str, phrases: Sequence[str] = BOILERPLATE_PHRASES) -> bool:
    """
    Check whether text contains any boilerplate phrase (case-insensitive).

    Examples:
        "Log in to comment" -> True
        "They wrote a short dialog in pairs" -> False
    """
    return any(_contains_phrase(text, phrase) for phrase in phrases)


def is_blocked_title(title: Optional[str]) -> bool:
    """
    Detect an anti-bot or access-denied page from its title.

    Examples:
        "Access Denied" -> True
        "403 Forbidden" -> True
        "Business cards" -> False
    """
    if not title:
        return False
    title_lower = title.lower()
    return any(phrase in title_lower for phrase in BLOCKED_TITLE_PHRASES)


def absolute_url(href: str, base_url: str) -> str:
    """
    Resolve a link against the site base URL and drop any fragment.

    Examples:
        ("2401/240101-x.html", "https://site.com") -> "https://site.com/2401/240101-x.html"
        ("/skills/reading", "https://site.com") -> "https://site.com/skills/reading"
    """
    base = base_url if base_url.endswith('/') else base_url + '/'
    url, _ = urldefrag(urljoin(base, href.strip()))
    return url


def first_text(soup: BeautifulSoup, selectors: Sequence[str]) -> str:
    """Return the text of the first selector that matches a non-empty element."""
    for selector in selectors:
        element = soup.select_one(selector)
        if element is None:
            continue
        text = clean_text(element.get_text(' ', strip=True))
        if text:
            return text
    return ''


def page_title(soup: BeautifulSoup, separator: str) -> str:
    """
    Return the document <title> up to the first separator.

    Examples:
        "Business cards | LearnEnglish" with "|" -> "Business cards"
    """
    if soup.title is None:
        return ''
    text = clean_text(soup.title.get_text())
    return text.split(separator)[0].strip()


def is_content_paragraph(
    text: str,
    min_length: int,
    exclude: Sequence[str] = BOILERPLATE_PHRASES
) -> bool:
    """A paragraph is content when it is long enough and free of boilerplate."""
    return len(text) > min_length and not is_boilerplate(text, exclude)


def collect_paragraphs(
    soup: BeautifulSoup,
    selectors: Sequence[str],
    min_length: int = 30,
    exclude: Sequence[str] = BOILERPLATE_PHRASES
) -> str:
    """
    Join content paragraphs from the first selector that yields any.

    Args:
        soup: Parsed page
        selectors: Ordered content-container selectors (e.g. '.article-body p')
        min_length: Shortest paragraph kept
        exclude: Boilerplate phrases that disqualify a paragraph

    Returns:
        Paragraphs joined by blank lines, or '' when every selector misses
    """
    for selector in selectors:
        texts = []
        for element in soup.select(selector):
            text = clean_text(element.get_text(' ', strip=True))
            if is_content_paragraph(text, min_length, exclude):
                texts.append(text)
        if texts:
            return '\n\n'.join(texts)
    return ''


def container_paragraphs(
    soup: BeautifulSoup,
    containers: Sequence[str],
    min_length: int = 30
) -> str:
    """Collect all long paragraphs under the first matching container."""
    for selector in containers:
        container = soup.select_one(selector)
        if container is None:
            continue
        texts = [clean_text(p.get_text(' ', strip=True)) for p in container.find_all('p')]
        texts = [t for t in texts if len(t) > min_length]
        if texts:
            return '\n\n'.join(texts)
    return ''


def largest_text_block(
    soup: BeautifulSoup,
    tag: str = 'div',
    min_length: int = 300,
    max_length: int = 3000,
    exclude: Sequence[str] = ('©',)
) -> str:
    """Return the longest element text within [min_length, max_length]."""
    best = ''
    for element in soup.find_all(tag):
        text = clean_text(element.get_text(' ', strip=True))
        if min_length <= len(text) <= max_length and not is_boilerplate(text, exclude):
            if len(text) > len(best):
                best = text
    return best


def is_navigation_text(text: str) -> bool:
    """Check whether link text reads like navigation ("Next", "Back home")."""
    text_lower = text.lower()
    return any(word in text_lower for word in NAVIGATION_WORDS)


def is_link_text_usable(text: str, min_length: int = 5, max_length: int = 150) -> bool:
    """Link text must be a plausible title: bounded length, not navigation."""
    return min_length < len(text) < max_length and not is_navigation_text(text)


def discover_links(
    soup: BeautifulSoup,
    selectors: Sequence[str],
    base_url: str,
    accept: Optional[Callable[[str], bool]] = None,
    limit: Optional[int] = None,
    seen: Optional[set] = None
) -> List[Tuple[str, str]]:
    """
    Find content links using the first selector that yields any.

    Args:
        soup: Parsed listing page
        selectors: Ordered link selectors
        base_url: Base for resolving relative hrefs
        accept: Extra predicate on the absolute URL
        limit: Stop after this many links
        seen: URLs already collected (updated in place, used for dedup)

    Returns:
        List of (absolute_url, link_text) tuples
    """
    seen = seen if seen is not None else set()
    for selector in selectors:
        found = []
        for element in soup.select(selector):
            if limit is not None and len(found) >= limit:
                break
            href = (element.get('href') or '').strip()
            text = clean_text(element.get_text(' ', strip=True))
            if not href or not is_link_text_usable(text):
                continue
            url = absolute_url(href, base_url)
            if url in seen or (accept and not accept(url)):
                continue
            seen.add(url)
            found.append((url, text))
        if found:
            return found
    return []


def _is_vocabulary_word(word: str, ignore: Sequence[str]) -> bool:
    word_lower = word.lower()
    return (
        2 < len(word) < 25
        and not word[0].isdigit()
        and '$' not in word
        and '.com' not in word_lower
        and '.org' not in word_lower
        and len(word.split()) <= 2
        and not any(ignored in word_lower for ignored in ignore)
    )


def extract_emphasis_vocabulary(
    soup: BeautifulSoup,
    ignore: Sequence[str] = VOCABULARY_IGNORE_WORDS
) -> List[Tuple[str, str]]:
    """
    Extract key words from bold/strong text.

    Returns:
        List of (word, '') tuples in document order, deduplicated
    """
    words = []
    seen = set()
    for element in soup.find_all(['strong', 'b']):
        word = clean_text(element.get_text())
        if not _is_vocabulary_word(word, ignore):
            continue
        if word.lower() in seen:
            continue
        seen.add(word.lower())
        words.append((word, ''))
    return words


def extract_table_vocabulary(soup: BeautifulSoup, max_word_length: int = 30) -> List[Tuple[str, str]]:
    """
    Extract (word, definition) pairs from two-column table rows.
    """
    pairs = []
    for row in soup.select('table tr'):
        cells = row.find_all('td')
        if len(cells) < 2:
            continue
        word = clean_text(cells[0].get_text(' ', strip=True))
        definition = clean_text(cells[1].get_text(' ', strip=True))
        if word and definition and len(word) < max_word_length and not is_boilerplate(f"{word} {definition}"):
            pairs.append((word, definition))
    return pairs


def _question_options(element: Tag, option_selector: str, max_length: int = 200) -> List[str]:
    options = []
    for option in element.select(option_selector):
        text = clean_text(option.get_text(' ', strip=True))
        if text and len(text) < max_length:
            options.append(text)
    return options[:MAX_OPTIONS]


def extract_questions(
    soup: BeautifulSoup,
    selectors: Sequence[str],
    option_selector: str = 'input[type="radio"] + label, .option, li',
    min_length: int = 10,
    max_length: int = 500
) -> List[Tuple[str, List[str]]]:
    """
    Extract comprehension questions from the first selector that yields any.

    The question is the first line of the element text, capped at 200
    characters. Options come from radio labels or list items (at most 4).

    Returns:
        List of (question, options) tuples
    """
    for selector in selectors:
        questions = []
        for element in soup.select(selector):
            raw = element.get_text('\n', strip=True)
            if not (min_length < len(raw) < max_length) or is_boilerplate(raw):
                continue
            question = raw.split('\n')[0].strip()[:200]
            questions.append((question, _question_options(element, option_selector)))
        if questions:
            return questions
    return []


def extract_tasks(
    soup: BeautifulSoup,
    selector: str = '.task, .exercise, [class*="task"]',
    default_instruction: str = 'Reading Task',
    max_description: int = 300
) -> List[Tuple[str, str]]:
    """
    Extract task records (instruction heading plus first paragraph).

    Returns:
        List of (instruction, description) tuples
    """
    tasks = []
    for element in soup.select(selector):
        heading = element.select_one('h2, h3, .task-title')
        paragraph = element.find('p')
        instruction = clean_text(heading.get_text(' ', strip=True)) if heading else ''
        description = clean_text(paragraph.get_text(' ', strip=True)) if paragraph else ''
        if (instruction or description) and not is_boilerplate(f"{instruction} {description}"):
            tasks.append((instruction or default_instruction, description[:max_description]))
    return tasks


def level_from_url(url: str, pattern: str) -> Optional[str]:
    """Return the first regex group of pattern found in url, if any."""
    match = re.search(pattern, url, re.IGNORECASE)
    return match.group(1) if match else None
