import logging
from typing import List

from models.idea_submission import ResearchPaper

logger = logging.getLogger(__name__)

# Stand-in for the institutional repository search; the catalogue is fixed
MOCK_RESEARCH_PAPERS = [
    {
        "id": "1",
        "title": "Machine Learning Applications in Sustainable Energy Systems",
        "description": "This research explores the application of advanced machine learning techniques for optimizing renewable energy systems and predicting energy consumption patterns.",
        "authors": "Dr. Sarah Mueller, Prof. Andreas Schmidt, Dr. Lisa Chen",
        "doi": "10.17617/3.7x",
        "url": "https://edmond.mpg.de/dataset.xhtml?persistentId=doi:10.17617/3.7x",
        "year": 2024,
        "subjects": ["Machine Learning", "Renewable Energy", "Sustainability", "Optimization"],
    },
    {
        "id": "2",
        "title": "AI-Driven Innovation in Healthcare: A Comprehensive Analysis",
        "description": "Comprehensive analysis of artificial intelligence applications in modern healthcare, including diagnostic tools, treatment optimization, and patient care systems.",
        "authors": "Prof. Michael Wagner, Dr. Emma Thompson, Dr. Rajesh Kumar",
        "doi": "10.17617/3.8y",
        "url": "https://edmond.mpg.de/dataset.xhtml?persistentId=doi:10.17617/3.8y",
        "year": 2024,
        "subjects": ["Artificial Intelligence", "Healthcare", "Medical Technology", "Patient Care"],
    },
    {
        "id": "3",
        "title": "Quantum Computing for Complex Optimization Problems",
        "description": "Investigation into quantum computing algorithms for solving NP-hard optimization problems in logistics, finance, and scientific computing.",
        "authors": "Dr. Johann Fischer, Prof. Maria Gonzalez, Dr. Wei Zhang",
        "doi": "10.17617/3.9z",
        "url": "https://edmond.mpg.de/dataset.xhtml?persistentId=doi:10.17617/3.9z",
        "year": 2023,
        "subjects": ["Quantum Computing", "Optimization", "Algorithms", "Complex Systems"],
    },
    {
        "id": "4",
        "title": "Sustainable Materials Science: Bio-Based Alternatives",
        "description": "Research on developing biodegradable and sustainable materials from renewable resources for industrial applications.",
        "authors": "Prof. Anna Schneider, Dr. Carlos Rodriguez, Dr. Kim Park",
        "doi": "10.17617/3.1a",
        "url": "https://edmond.mpg.de/dataset.xhtml?persistentId=doi:10.17617/3.1a",
        "year": 2024,
        "subjects": ["Materials Science", "Sustainability", "Biodegradable Materials", "Green Chemistry"],
    },
    {
        "id": "5",
        "title": "Neural Networks in Climate Modeling and Prediction",
        "description": "Application of deep neural networks for improving climate models and long-term weather prediction accuracy.",
        "authors": "Dr. Thomas Braun, Prof. Jennifer Liu, Dr. Ahmed Hassan",
        "doi": "10.17617/3.2b",
        "url": "https://edmond.mpg.de/dataset.xhtml?persistentId=doi:10.17617/3.2b",
        "year": 2023,
        "subjects": ["Neural Networks", "Climate Science", "Weather Prediction", "Deep Learning"],
    },
]


def _matches(paper: dict, needle: str) -> bool:
    return (
        needle in paper["title"].lower()
        or needle in paper["description"].lower()
        or any(needle in subject.lower() for subject in paper["subjects"])
        or needle in paper["authors"].lower()
    )


def search_research_papers(query: str) -> List[ResearchPaper]:
    """Case-insensitive substring match on title, description, subjects and authors."""
    needle = query.strip().lower()
    results = [ResearchPaper(**paper, selected=False) for paper in MOCK_RESEARCH_PAPERS if _matches(paper, needle)]
    logger.info(f"Research search for '{query}' returned {len(results)} papers")
    return results
