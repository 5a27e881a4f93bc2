"""Curated jobs served when neither the provider nor any cache can answer."""

from jobsearch.models import JobRecord

STATIC_FALLBACK_JOBS: tuple[JobRecord, ...] = tuple(
    JobRecord(source="static", job_salary_currency="USD", **job)
    for job in (
        {
            "job_id": "static_ai_pm_001",
            "job_title": "AI Product Manager",
            "employer_name": "Anthropic",
            "job_city": "San Francisco",
            "job_state": "CA",
            "job_country": "US",
            "job_description": (
                "Own the roadmap for AI-assisted developer tools. Work with research and "
                "engineering to turn model capabilities into products customers rely on."
            ),
            "job_employment_type": "FULLTIME",
            "job_min_salary": 180000,
            "job_max_salary": 260000,
            "job_apply_link": "https://www.anthropic.com/careers",
        },
        {
            "job_id": "static_ml_eng_002",
            "job_title": "Machine Learning Engineer",
            "employer_name": "Hugging Face",
            "job_city": "",
            "job_state": "",
            "job_country": "US",
            "job_description": (
                "Build and maintain training and inference pipelines for open models. "
                "Remote-first team; strong Python and PyTorch experience required."
            ),
            "job_employment_type": "FULLTIME",
            "job_min_salary": 150000,
            "job_max_salary": 220000,
            "job_apply_link": "https://apply.workable.com/huggingface/",
        },
        {
            "job_id": "static_ai_research_003",
            "job_title": "Applied AI Research Scientist",
            "employer_name": "Cohere",
            "job_city": "Toronto",
            "job_state": "ON",
            "job_country": "CA",
            "job_description": (
                "Research retrieval-augmented generation and evaluation methods, and ship "
                "the results into production language model APIs."
            ),
            "job_employment_type": "FULLTIME",
            "job_min_salary": 170000,
            "job_max_salary": 250000,
            "job_apply_link": "https://cohere.com/careers",
        },
        {
            "job_id": "static_data_sci_004",
            "job_title": "Senior Data Scientist, AI Platform",
            "employer_name": "Databricks",
            "job_city": "Seattle",
            "job_state": "WA",
            "job_country": "US",
            "job_description": (
                "Design experiments and metrics for LLM-powered features across the "
                "lakehouse platform. Partner with product on model quality."
            ),
            "job_employment_type": "FULLTIME",
            "job_min_salary": 160000,
            "job_max_salary": 230000,
            "job_apply_link": "https://www.databricks.com/company/careers",
        },
        {
            "job_id": "static_ai_eng_005",
            "job_title": "AI Engineer (LLM Applications)",
            "employer_name": "Scale AI",
            "job_city": "New York",
            "job_state": "NY",
            "job_country": "US",
            "job_description": (
                "Prototype and productionize LLM agents, evaluation harnesses and "
                "data tooling for enterprise customers."
            ),
            "job_employment_type": "FULLTIME",
            "job_min_salary": 155000,
            "job_max_salary": 215000,
            "job_apply_link": "https://scale.com/careers",
        },
        {
            "job_id": "static_mlops_006",
            "job_title": "MLOps Engineer",
            "employer_name": "Weights & Biases",
            "job_city": "",
            "job_state": "",
            "job_country": "US",
            "job_description": (
                "Operate the infrastructure behind experiment tracking and model registry "
                "services. Kubernetes, Terraform and Python."
            ),
            "job_employment_type": "CONTRACTOR",
            "job_apply_link": "https://wandb.ai/site/careers",
        },
    )
)
