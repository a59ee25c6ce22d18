"""Built-in sample documents used when an ingestion run is given none."""

SAMPLE_DOCUMENTS: dict[str, str] = {
    "sample_policy": """Sample Policy Document

1. Introduction
This is a sample policy document that demonstrates the embedding functionality.

2. Guidelines
a. Follow all procedures outlined in this document.
b. Report any issues to the appropriate department.
c. Regular training sessions will be conducted.

3. Compliance
All employees must comply with these policies to ensure smooth operations.""",
    "sample_manual": """Sample Manual

1. Getting Started
This manual provides step-by-step instructions for common procedures.

2. Basic Operations
a. Login to the system using your credentials.
b. Navigate to the appropriate section.
c. Complete your assigned tasks.

3. Troubleshooting
Contact support if you encounter any technical difficulties.""",
}


def get_sample_documents() -> dict[str, str]:
    """Return a fresh copy of the sample documents."""
    return dict(SAMPLE_DOCUMENTS)
