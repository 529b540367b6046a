"""
Prompt templates for configuration generation.

Each template receives the sample records rendered as indented JSON.
"""

import json
from typing import Any, Dict, List


def render_records(records: List[Dict[str, Any]]) -> str:
    return json.dumps(records, indent=2, ensure_ascii=False, default=str)


# =============================================================================
# Searchable Attributes
# =============================================================================

SEARCHABLE_ATTRIBUTES_PROMPT = """
Analyze these sample records and determine which attributes should be searchable in an Algolia search index.

Sample records:
{records}

CRITICAL RULES:
- Only suggest attributes that actually exist in the provided sample records, don't invent ones
- Nested attributes may be referenced with dot notation (e.g. "author.name")
- Attributes of equal importance may be grouped in one comma-separated entry (e.g. "title,alternative_title")

INCLUDE attributes that are:
- Descriptive text attributes (name, title, description, summary, bio, content)
- Brand, manufacturer, or company names
- Category or type information
- Lists of features, actors, ingredients, or other descriptive elements
- Keywords and tags
- Filter attributes that users might search for (color, size, material, genre)
- Author, creator, or contributor names
- Location or place names

EXCLUDE attributes that are:
- URLs (image URLs, product URLs, links)
- IDs (except objectID which is already handled)
- Numeric values meant for ranking/sorting (price, rating, popularity_score)
- Dates and timestamps
- Boolean flags
- Display-only attributes (thumbnails, status codes)
- Internal metadata

Wrap an attribute in "unordered(...)" when the position of the match inside the value should not matter
(long descriptions, lists of tags).

Focus on attributes that users would naturally search for when looking for these items.
Return the attributes in order of search importance (most important first).
"""


# =============================================================================
# Custom Ranking
# =============================================================================

CUSTOM_RANKING_PROMPT = """
Analyze these sample records and determine which attributes should be used for custom ranking in an Algolia search index.

Sample records:
{records}

Step 1: Identify potential custom ranking attributes from the sample records
Step 2: Order custom ranking attributes by importance
Step 3: Determine appropriate sort order
Step 4: Format final result with sort order

CRITICAL RULES:
- Only suggest attributes that actually exist in the provided sample records, don't invent ones
- Only suggest attributes truly suitable for custom ranking. If no attributes clearly indicate quality or relevance, return an empty array.

INCLUDE numeric/boolean attributes that indicate quality or relevance:
- Sales counts, purchase counts, order counts
- View counts, click counts, impression counts
- Likes, favorites, votes, ratings (numeric)
- Popularity scores, trending scores
- Review counts, comment counts
- Stock levels, availability counts
- Release dates, creation dates (as timestamps)
- Priority levels, importance scores
- Boolean flags for featured, premium, bestseller status

EXCLUDE attributes that are:
- Text/string attributes (these go in searchableAttributes)
- IDs and internal references
- URLs and display attributes
- Prices (usually used for sorting, not ranking)
- Coordinates and technical data

Algolia uses tie-breaking: if the first attribute breaks ties, later ones are ignored.
ORDER BY SIGNAL QUALITY:
1. Processed metrics BEFORE raw counts (derived scores before raw tallies)
2. Business-critical metrics first (revenue, quality, engagement)
3. Avoid high-cardinality attributes early (raw counts create ranking noise)
4. Prefer normalized scores over raw measurements

Sort order:
- Use "desc(attribute)" for attributes where higher values are better (sales, ratings, popularity)
- Use "asc(attribute)" for attributes where lower values are better (rank position, priority level)

Explain your answer step-by-step in the reasoning field.
"""


# =============================================================================
# Attributes for Faceting
# =============================================================================

FACETING_PROMPT = """
Analyze these sample records and determine which attributes should be configured for faceting in an Algolia search index.

Sample records:
{records}

Facets are filterable categories that allow users to refine search results. Think of them as filters users can apply.

CRITICAL RULES:
- Only suggest attributes that actually exist in the provided sample records, don't invent ones

INCLUDE attributes that are good for filtering:
- Category/type fields (genre, category, department, section)
- Brand, manufacturer, designer, author, artist names
- Color, size, material, style attributes
- Status fields (available, featured, new, bestseller)
- Location/geographic attributes (city, country, region)
- Format/type attributes (format, edition, version)
- Boolean flags that users might filter by
- Enumerated values with limited options

EXCLUDE attributes that are not good for faceting:
- Unique identifiers (IDs, SKUs, slugs)
- URLs and links
- Long text descriptions
- Numeric values used for ranking (price, rating, sales)
- Dates and timestamps (unless they represent categories like year)
- Attributes with too many unique values (unless searchable)

For each faceting attribute, determine the configuration:
- Use "attribute" for regular facets (limited unique values, <10)
- Use "searchable(attribute)" for facets with many values (brands with 10s of options)
- Use "filterOnly(attribute)" for facets used only programmatically, not displayed

Prioritize attributes that users would commonly want to filter by.
"""


# =============================================================================
# Sort-by Replicas
# =============================================================================

SORTABLE_ATTRIBUTES_PROMPT = """
Analyze these sample records and determine which attributes should be used for sorting in an Algolia search index.

Sample records:
{records}

Sorting allows users to order results by specific attributes (like price low-to-high), overriding relevance-based ranking.

IMPORTANT: Only suggest attributes that are truly suitable for sorting and that exist in the sample records.
If no attributes are clearly sortable, return an empty array. Return bare attribute names, without asc()/desc().

INCLUDE numeric attributes that users commonly sort by:
- Prices, costs, amounts (price, cost, total, fee)
- Dates and timestamps (created_at, published_date, release_date, updated_at)
- Ratings and scores (rating, score, stars, grade)
- Popularity metrics (views, likes, sales, downloads, popularity)
- Quantities and counts (stock, quantity, reviews_count, votes)

EXCLUDE attributes that are not good for sorting:
- Text/string attributes (names, descriptions, titles)
- Unique identifiers (random IDs, UUIDs)
- URLs and links
- Boolean values
- Internal metadata

AVOID DUPLICATES AND SIMILAR ATTRIBUTES:
- If multiple price-related attributes exist (price, cost, amount, total), choose the most user-friendly one (typically "price")
- If multiple date attributes exist, choose the most relevant for end users (typically publication or creation date)
- If multiple rating attributes exist (rating, score, stars), choose the most commonly understood one
- If multiple count attributes exist (views, likes, downloads), choose the primary engagement metric

Prioritize end-user usability over technical completeness.
Limit to 3-4 attributes maximum.
"""
