"""
Sample usage of the tag engine against a local SQLite file.

Run after `pip install -e .`:
    python examples/sample_usage.py
"""

from pathlib import Path

import sqlalchemy as sa

from taggg import TagEngine
from taggg.logging_config import setup_logging


def main():
    """Tag a few web pages and read the tags back"""
    
    print("=" * 80)
    print("Taggg Sample Usage")
    print("=" * 80)
    print()
    
    setup_logging("DEBUG")
    
    # 1. Initialize
    print("1. Initializing tables...")
    db_path = Path(__file__).parent / "sample_tags.db"
    tags = TagEngine(sa.create_engine(f"sqlite:///{db_path}")).init()
    print(f"   ✓ Using {db_path}")
    print()
    
    # 2. Tag resources given in different shapes
    print("2. Writing tags...")
    alice = tags.resolve("person:alice").id
    tags.write("uri:http://google.com/", "dc:description", "web search engine", alice)
    tags.write("uri:http://google.com/", "dc:subject", "search", alice)
    tags.write(
        {"uri": "http://example.org/", "value": "Example", "content": "<html>...</html>"},
        "dc:format",
        "text/html",
        alice
    )
    # literal colons in a value are escaped
    tags.write("uri:http://example.org/", "dc:identifier", "urn\\:example\\:1", alice)
    print("   ✓ Tags written")
    print()
    
    # 3. Check and remove
    print("3. Checking tags...")
    print(f"   google described:  {tags.exists('uri:http://google.com/', 'dc:description', 'web search engine', alice)}")
    tags.erase("uri:http://google.com/", "dc:subject", "search", alice)
    print(f"   google subject:    {tags.exists('uri:http://google.com/', 'dc:subject', 'search', alice)}")
    print()
    
    # 4. Report
    print("4. Dublin Core predicates in use:")
    for resource in tags.fetch(filters={"class": "dc"}, orders=["value"]):
        print(f"   • {resource.value}")
    
    tags.close()


if __name__ == "__main__":
    main()
