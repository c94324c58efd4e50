"""Curated cover letter examples for few-shot prompting.

The catalog is a fixed, read-only table built on first use. Lookups are pure
functions over it, so it can be shared across threads without locking.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import List, Tuple

from .analysis import ExperienceLevel, Industry, Tone

DEFAULT_EXAMPLE_COUNT = 3


@dataclass(frozen=True)
class CoverLetterExample:
    """A high-quality letter body labelled by industry, level and tone."""
    id: str
    industry: Industry
    experience_level: ExperienceLevel
    tone: Tone
    description: str
    job_title: str
    company_name: str
    candidate_profile: str
    output_text: str
    quality_score: float

    @property
    def input_summary(self) -> str:
        """One-line summary of the inputs the letter was written from."""
        return (
            f"Job title: {self.job_title}; Company: {self.company_name}; "
            f"Candidate: {self.candidate_profile}"
        )


_TECH_MID_PROFESSIONAL = """\
I am applying for the Senior Software Engineer position at TechFlow Solutions. Over four years of full-stack development I have moved from shipping individual features to leading small teams through complete platform changes, and I would like to bring that experience to your engineering group.

At DataVision Inc. I designed and implemented web services that now handle more than 100,000 daily users. I led five developers through a migration from a legacy monolith to a React and Node.js stack, which improved page performance by 40% and reduced hosting costs by 25%. That work drew directly on the Python, React and agile delivery skills listed in your posting.

TechFlow Solutions' work on analytics platforms for mid-sized businesses matches the problems I most enjoy solving. I have collaborated closely with product and data teams to turn reporting requirements into dependable services, and I would welcome the chance to do the same for your customers.

Thank you for considering my application. I would appreciate the opportunity to discuss how my experience could support TechFlow Solutions' next stage of growth."""

_FINANCE_SENIOR_PROFESSIONAL = """\
I am pleased to submit my application for the Senior Financial Analyst position at Global Capital Partners. Seven years in corporate finance and investment analysis, together with the CFA charter, have given me a thorough grounding in valuation, transaction support and capital markets.

At Investment Solutions LLC I managed financial modelling and due diligence for more than $500M in M&A transactions. I developed a valuation framework that improved forecast accuracy by 15% and reduced turnaround time by 30%, and it supported the completion of 12 acquisitions. My day-to-day work covers DCF modelling, comparable company analysis and sector research.

Global Capital Partners' disciplined, research-led approach to investment banking reflects how I prefer to work. Your expansion into emerging markets is an area where I have already contributed to cross-border deal analysis, and I would value the chance to support that effort.

I would appreciate the opportunity to discuss how my analytical experience can contribute to the results Global Capital Partners delivers for its clients."""

_CREATIVE_ENTRY_FRIENDLY = """\
I was excited to see the Marketing Coordinator opening at Creative Spark Agency. As a recent marketing graduate with hands-on campaign experience, I would love to help your team produce the kind of inventive, measurable work your agency is known for.

During my internship at Bright Ideas Marketing I managed social media campaigns that increased client engagement by 45% and grew followers by 20% across three platforms. I also collaborated on a brand identity project that won a regional advertising award. I work comfortably in Adobe Creative Suite and keep up with shifts in short-form video and community-led marketing.

Creative Spark's campaign for EcoTech Solutions showed how clear storytelling can build awareness and drive action at the same time. I would enjoy contributing fresh ideas and steady coordination to projects like that one.

Thank you for reading my application. I would be glad to talk about how my energy and marketing skills could support Creative Spark Agency's client work."""

_GENERAL_MID_DIRECT = """\
Your Project Manager role matches my five years of leading cross-functional projects to deadline and within budget. I hold the PMP certification and have managed individual projects worth $2M+.

At Strategic Solutions Inc. I have managed 15+ projects with 98% on-time delivery, finishing on average 12% under budget. I led the rollout of a new ERP system that improved operational efficiency by 35% and coordinated 20+ stakeholders across four departments. I use Agile and Waterfall methods as each project requires.

Apex Corporation's focus on operational excellence and continuous improvement is where my process optimisation and stakeholder management experience applies most directly. I can contribute to your delivery metrics from the first quarter.

I would welcome a conversation about how my project management record can help Apex Corporation reach its strategic goals."""

_TECH_SENIOR_DIRECT = """\
I am applying for the Engineering Manager position at InnovateTech. I have spent eight years building engineering teams and scaling platforms in startup environments, and your plans for enterprise software are a close fit for that experience.

As Engineering Manager at ScaleUp Solutions I built and led a team of 12 engineers that shipped three major releases, grew the user base by 300% and reduced downtime by 85%. I implemented agile practices that improved sprint velocity by 40% and set up a mentoring programme that cut onboarding time for junior developers by 50%. My technical background covers web platforms, cloud architecture and DevOps.

InnovateTech's emphasis on technical excellence matches how I lead: clear goals, strong ownership and steady delivery. I want to help your teams ship products that change how businesses operate.

I would like to discuss how my engineering leadership can help InnovateTech meet its growth targets."""

_FINANCE_ENTRY_PROFESSIONAL = """\
I am interested in the Financial Analyst position at Metropolitan Financial Group. As a recent finance graduate with practical experience in modelling and analysis, I am eager to begin my career with an organisation known for rigorous client service.

During my internship at Regional Investment Advisors I developed financial models for client portfolios totalling $15M and researched sectors that informed recommendations outperforming their benchmark by 8%. I also built automated Excel reporting templates that reduced monthly reporting time by 25%.

Metropolitan Financial Group's investment in developing early-career analysts and its recent move into sustainable investing both appeal to me. My academic research focused on ESG strategies and their effect on long-term portfolio returns, and I would be glad to apply it to your clients' needs.

I would welcome the opportunity to discuss how my analytical skills and attention to detail can contribute to Metropolitan Financial Group's continued success."""

_GENERAL_SENIOR_PROFESSIONAL = """\
I am writing in response to the Director of Operations opening at Northbridge Logistics. With twelve years of operations leadership across distribution and customer service, I have consistently improved cost, speed and service quality at the same time.

As Head of Operations at Harbor Freight Partners I managed 4 regional sites and a team of 180 staff. I led a network redesign that reduced fulfilment costs by 18% and improved on-time delivery from 91% to 97%. I also implemented a quarterly planning process that aligned finance, sales and operations and saved $3M in its first year.

Northbridge Logistics' investment in automation and its focus on dependable customer commitments match the priorities I have managed toward throughout my career. I would value the chance to help your leadership team scale operations while keeping service standards high.

Thank you for your consideration. I would appreciate the opportunity to discuss how my operations experience can support Northbridge Logistics' plans."""

_CREATIVE_MID_DIRECT = """\
I am applying for the Senior Product Designer role at Lumen Studio. I bring five years of product and interaction design for consumer apps, and a portfolio of shipped work grounded in user research.

At Brightline Apps I led the redesign of a subscription onboarding flow that increased trial conversion by 22% and reduced support tickets by 30%. I built and maintained a design system used by 6 product teams, which shortened design-to-development handoff from two weeks to four days. I collaborate closely with engineers and researchers and test early and often.

Lumen Studio's work for health and wellbeing brands shows a clear respect for accessibility and plain language, both central to how I design. I want to contribute that same care to your client projects.

I would like to walk you through my portfolio and discuss how I can contribute to Lumen Studio's design work."""


@lru_cache(maxsize=1)
def get_example_catalog() -> Tuple[CoverLetterExample, ...]:
    """Return the curated example catalog, building it on first use."""
    return (
        CoverLetterExample(
            id="tech_mid_professional",
            industry=Industry.TECH,
            experience_level=ExperienceLevel.MID,
            tone=Tone.PROFESSIONAL,
            description="Mid-level software engineer applying to a product company",
            job_title="Senior Software Engineer",
            company_name="TechFlow Solutions",
            candidate_profile="4 years experience, Python/React, led team projects",
            output_text=_TECH_MID_PROFESSIONAL,
            quality_score=0.95,
        ),
        CoverLetterExample(
            id="finance_senior_professional",
            industry=Industry.FINANCE,
            experience_level=ExperienceLevel.SENIOR,
            tone=Tone.PROFESSIONAL,
            description="Senior financial analyst applying to an investment bank",
            job_title="Senior Financial Analyst",
            company_name="Global Capital Partners",
            candidate_profile="7 years experience, CFA charterholder, M&A analysis",
            output_text=_FINANCE_SENIOR_PROFESSIONAL,
            quality_score=0.93,
        ),
        CoverLetterExample(
            id="tech_senior_direct",
            industry=Industry.TECH,
            experience_level=ExperienceLevel.SENIOR,
            tone=Tone.DIRECT,
            description="Engineering manager applying to a growing startup",
            job_title="Engineering Manager",
            company_name="InnovateTech",
            candidate_profile="8 years experience, team leadership, startup background",
            output_text=_TECH_SENIOR_DIRECT,
            quality_score=0.92,
        ),
        CoverLetterExample(
            id="creative_entry_friendly",
            industry=Industry.CREATIVE,
            experience_level=ExperienceLevel.ENTRY,
            tone=Tone.FRIENDLY,
            description="Entry-level marketing coordinator applying to a creative agency",
            job_title="Marketing Coordinator",
            company_name="Creative Spark Agency",
            candidate_profile="Recent graduate, agency internship, social media campaigns",
            output_text=_CREATIVE_ENTRY_FRIENDLY,
            quality_score=0.91,
        ),
        CoverLetterExample(
            id="general_senior_professional",
            industry=Industry.GENERAL,
            experience_level=ExperienceLevel.SENIOR,
            tone=Tone.PROFESSIONAL,
            description="Operations leader applying for a director role",
            job_title="Director of Operations",
            company_name="Northbridge Logistics",
            candidate_profile="12 years experience, multi-site operations, cost reduction",
            output_text=_GENERAL_SENIOR_PROFESSIONAL,
            quality_score=0.90,
        ),
        CoverLetterExample(
            id="general_mid_direct",
            industry=Industry.GENERAL,
            experience_level=ExperienceLevel.MID,
            tone=Tone.DIRECT,
            description="Mid-level project manager applying to a corporate role",
            job_title="Project Manager",
            company_name="Apex Corporation",
            candidate_profile="5 years experience, PMP certification, cross-functional delivery",
            output_text=_GENERAL_MID_DIRECT,
            quality_score=0.89,
        ),
        CoverLetterExample(
            id="finance_entry_professional",
            industry=Industry.FINANCE,
            experience_level=ExperienceLevel.ENTRY,
            tone=Tone.PROFESSIONAL,
            description="Entry-level financial analyst applying to corporate finance",
            job_title="Financial Analyst",
            company_name="Metropolitan Financial Group",
            candidate_profile="Recent finance graduate, internship, Excel modelling",
            output_text=_FINANCE_ENTRY_PROFESSIONAL,
            quality_score=0.88,
        ),
        CoverLetterExample(
            id="creative_mid_direct",
            industry=Industry.CREATIVE,
            experience_level=ExperienceLevel.MID,
            tone=Tone.DIRECT,
            description="Product designer applying to a design studio",
            job_title="Senior Product Designer",
            company_name="Lumen Studio",
            candidate_profile="5 years product design, design systems, user research",
            output_text=_CREATIVE_MID_DIRECT,
            quality_score=0.87,
        ),
    )


def get_example_by_id(example_id: str) -> CoverLetterExample:
    """Look up an example by id.

    Raises:
        KeyError: If no example has that id
    """
    for example in get_example_catalog():
        if example.id == example_id:
            return example
    raise KeyError(example_id)


def get_examples_by_industry(industry: Industry) -> List[CoverLetterExample]:
    """Examples for an industry, plus the general-purpose ones."""
    return [
        example for example in get_example_catalog()
        if example.industry in (industry, Industry.GENERAL)
    ]


def get_examples_by_level(level: ExperienceLevel) -> List[CoverLetterExample]:
    return [example for example in get_example_catalog() if example.experience_level == level]


def get_examples_by_tone(tone: Tone) -> List[CoverLetterExample]:
    return [example for example in get_example_catalog() if example.tone == tone]


def _candidate_pool(
    industry: Industry,
    level: ExperienceLevel,
    tone: Tone,
    count: int,
) -> List[CoverLetterExample]:
    catalog = get_example_catalog()
    pool = [
        example for example in catalog
        if example.industry == industry and example.experience_level == level and example.tone == tone
    ]
    if len(pool) < count:
        selected = {example.id for example in pool}
        pool.extend(
            example for example in catalog
            if example.id not in selected and (
                example.industry in (industry, Industry.GENERAL)
                or example.experience_level == level
                or example.tone == tone
            )
        )
    # sorted() is stable, so equal scores keep catalog order
    return sorted(pool, key=lambda example: example.quality_score, reverse=True)


def select_examples(
    industry: Industry,
    level: ExperienceLevel,
    tone: Tone,
    count: int = DEFAULT_EXAMPLE_COUNT,
    attempt_number: int = 1,
) -> List[CoverLetterExample]:
    """Select examples for a prompt, rotating through the pool across attempts.

    Exact matches on industry, level and tone come first. When there are
    fewer than `count`, the pool widens to examples sharing any one
    dimension (general examples count as an industry match). The pool is
    ranked by quality score. When it holds more than `count` examples,
    attempt k takes `count` consecutive entries starting at
    ((k - 1) * count) mod pool size, wrapping around, so successive retries
    see different exemplars without randomness.

    Args:
        industry: Detected job industry
        level: Detected candidate experience level
        tone: Requested tone
        count: Number of examples to return
        attempt_number: 1-based attempt counter

    Returns:
        Up to `count` examples with unique ids
    """
    if count < 1:
        return []
    pool = _candidate_pool(industry, level, tone, count)
    if len(pool) <= count:
        return pool[:count]

    start = ((max(attempt_number, 1) - 1) * count) % len(pool)
    return [pool[(start + offset) % len(pool)] for offset in range(count)]
