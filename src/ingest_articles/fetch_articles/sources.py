"""Default feeds registered by `ingest-articles --seed-sources`."""

DEFAULT_FEEDS = {
    # BBC
    "BBC News": "https://feeds.bbci.co.uk/news/rss.xml",
    "BBC World": "https://feeds.bbci.co.uk/news/world/rss.xml",
    "BBC Technology": "https://feeds.bbci.co.uk/news/technology/rss.xml",
    # The Guardian
    "Guardian World": "https://www.theguardian.com/world/rss",
    "Guardian Business": "https://www.theguardian.com/business/rss",
    "Guardian Technology": "https://www.theguardian.com/technology/rss",
    # NPR
    "NPR News": "https://feeds.npr.org/1001/rss.xml",
    "NPR Science": "https://feeds.npr.org/1007/rss.xml",
    # Sky News
    "Sky World": "https://feeds.skynews.com/feeds/rss/world.xml",
    "Sky Technology": "https://feeds.skynews.com/feeds/rss/technology.xml",
    # Ars Technica (Atom-style content blocks)
    "Ars Technica": "https://feeds.arstechnica.com/arstechnica/index",
}
