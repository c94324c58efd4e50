"""Sample résumé, job description and completions shared by tests."""

from datetime import datetime, timezone

RESUME = """Jane Doe
Seattle, WA

Experience
- Increased checkout conversion by 25% with Python services
- Reduced infrastructure costs by $40000 through an AWS migration
- Led a team of 6 engineers delivering payment APIs

Education
- BSc Computer Science
"""

JOB_DESCRIPTION = """Company: Acme Corp
Position: Backend Engineer

Requirements:
- Python services at scale
- AWS infrastructure experience
- Payment APIs
"""

GOOD_BODY = """I am excited to apply for the Backend Engineer role at Acme Corp. As a Seattle, WA based engineer I have built Python services and AWS infrastructure for payment platforms.

At my current company I increased checkout conversion by 25% with Python services and reduced infrastructure costs by $40000 through an AWS migration. I also led a team of 6 engineers delivering payment APIs.

I have implemented monitoring, developed deployment tooling and collaborated with product teams to ship reliable features every sprint.

I would welcome the chance to discuss how my experience can help Acme Corp scale its payment platform."""

GOOD_LETTER = f"""Dear Hiring Manager,

{GOOD_BODY}

Sincerely,

Jane Doe"""

# Good content with no greeting, closing or signature: scores about 0.7
MEDIUM_LETTER = GOOD_BODY

LOW_LETTER = "I want this job. I have many skills and I will work very hard for your team every day."

FIXED_NOW = datetime(2024, 3, 5, 9, 30, tzinfo=timezone.utc)
