"""Basic usage example for the people search system.

Requires OPENAI_API_KEY (or PEOPLE_SEARCH_OPENAI_API_KEY) in the environment.
"""

import asyncio

from people_search import PeopleSearchService, UserProfile


PLAIN_TEXT_PROFILES = [
    "Maria Garcia is a senior data scientist in Madrid. She works with Python, PyTorch "
    "and SQL, previously at Telefonica and Glovo, and enjoys running marathons.",
    "Tom Becker, backend engineer from Berlin. 7 years of Go and Kubernetes, "
    "ex-Zalando. Contact: tom.becker@example.com",
    "Priya Nair leads product design at a fintech startup in London. Figma, user research, "
    "design systems. Loves pottery.",
]

STRUCTURED_PROFILES = [
    UserProfile(
        id="crm-101",
        name="Lukas Novak",
        email="lukas@example.com",
        role="Machine Learning Engineer",
        location="Prague",
        skills=["Python", "TensorFlow", "MLOps"],
        previous_companies=["Avast"],
        experience="5 years deploying ML models to production",
    ),
    UserProfile(
        id="crm-102",
        name="Aiko Tanaka",
        email="aiko@example.com",
        role="Frontend Developer",
        location="Berlin",
        skills=["TypeScript", "React"],
        interests=["accessibility"],
    ),
]


async def people_search_demo():
    """Demonstrate ingest and search."""
    print("🔍 People Search - Basic Usage Demo")
    print("=" * 50)

    print("\n1. Initializing people search service...")
    async with PeopleSearchService.create(log_level="INFO") as service:

        print("\n2. Syncing users...")
        report = await service.sync_users(
            plain_texts=PLAIN_TEXT_PROFILES,
            sources={"crm": STRUCTURED_PROFILES}
        )
        print(f"   Saved: {report.to_dict()}")

        print("\n3. Performing searches...")
        search_examples = [
            ("python developers in Europe", None),
            ("designers in London", None),
            ("engineers who know Kubernetes", None),
            ("people in Berlin", {"location": "Berlin"}),
        ]

        for query, metadata_filter in search_examples:
            print(f"\n   Query: '{query}'" + (f" filter={metadata_filter}" if metadata_filter else ""))

            response = await service.search(query, top_k=5, threshold=0.5, metadata_filter=metadata_filter)

            if response.results:
                print(f"   Found {response.total_found} people in {response.processing_time_ms:.0f}ms:")
                for i, match in enumerate(response.results, 1):
                    print(f"     {i}. {match.name} ({match.role}, {match.location}) - Match: {match.match_score}%")
                    print(f"        Why: {match.match_reason}")
            else:
                print("   No matching people found")

            print(f"   Answer: {response.final_answer}")

        print("\n4. Health check...")
        health = await service.health_check()
        print(f"   System status: {health['status']}")
        print(f"   Stored profiles: {health['stats']['vector_store']['total_documents']}")

    print("\n✅ Demo completed successfully!")


if __name__ == "__main__":
    asyncio.run(people_search_demo())
