"""Pytest configuration and fixtures."""

import os
from datetime import datetime, timezone

import pytest

# Set environment variables before imports
os.environ["TABLE_NAME"] = "sitegen-test"
os.environ["STAGE"] = "test"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ.pop("UNSPLASH_ACCESS_KEY", None)


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def dynamodb_table(aws_credentials):
    """Create mocked DynamoDB table."""
    import boto3
    from moto import mock_aws

    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")

        table = dynamodb.create_table(
            TableName="sitegen-test",
            KeySchema=[
                {"AttributeName": "PK", "KeyType": "HASH"},
                {"AttributeName": "SK", "KeyType": "RANGE"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "PK", "AttributeType": "S"},
                {"AttributeName": "SK", "AttributeType": "S"},
                {"AttributeName": "GSI1PK", "AttributeType": "S"},
                {"AttributeName": "GSI1SK", "AttributeType": "S"},
            ],
            GlobalSecondaryIndexes=[
                {
                    "IndexName": "GSI1",
                    "KeySchema": [
                        {"AttributeName": "GSI1PK", "KeyType": "HASH"},
                        {"AttributeName": "GSI1SK", "KeyType": "RANGE"},
                    ],
                    "Projection": {"ProjectionType": "ALL"},
                },
            ],
            BillingMode="PAY_PER_REQUEST",
        )

        table.wait_until_exists()

        yield table


@pytest.fixture
def business_repo(dynamodb_table):
    """Business repository bound to the mocked table."""
    from sitegen.repositories.business import BusinessRepository

    repo = BusinessRepository("sitegen-test")
    # Resolve the boto3 resource on the test thread
    assert repo.table is not None
    return repo


@pytest.fixture
def job_repo(dynamodb_table):
    """Generation job repository bound to the mocked table."""
    from sitegen.repositories.generation_job import GenerationJobRepository

    repo = GenerationJobRepository("sitegen-test")
    assert repo.table is not None
    return repo


@pytest.fixture
def sample_business(business_repo):
    """Create a persisted business."""
    from sitegen.models.business import Business

    business = Business(
        id="biz-123",
        user_id="user-456",
        name="Bella Cucina",
    )
    return business_repo.create_business(business)


@pytest.fixture
def sample_profile() -> dict:
    """A valid business profile as it arrives over the wire (camelCase)."""
    return {
        "name": "Bella Cucina",
        "category": "restaurant",
        "location": "Portland, OR",
        "services": ["Dine-in", "Catering", "Private Events"],
        "valueProposition": "Handmade pasta and seasonal Italian plates",
        "targetAudience": "Food lovers and families",
        "brandTone": "friendly",
        "brandColors": ["#B91C1C", "#FDE68A"],
        "trustSignals": ["Family owned since 1998", "Locally sourced ingredients"],
        "seoKeywords": [
            "italian restaurant",
            "fresh pasta",
            "portland dining",
            "catering",
            "private events",
        ],
        "contactPreferences": {"email": True, "phone": True, "booking": False},
        "desiredFeatures": ["Testimonials", "contact form"],
    }


@pytest.fixture
def sample_understanding(sample_profile):
    """The sample profile as a validated BusinessUnderstanding."""
    from sitegen.models.business_understanding import BusinessUnderstanding

    return BusinessUnderstanding.model_validate(sample_profile)


@pytest.fixture
def fixed_now() -> datetime:
    """A fixed clock value."""
    return datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def lambda_context():
    """Minimal Lambda context object."""

    class Context:
        function_name = "website-generation-worker"
        aws_request_id = "test-request-id"
        memory_limit_in_mb = 512

        def get_remaining_time_in_millis(self):
            return 300000

    return Context()
