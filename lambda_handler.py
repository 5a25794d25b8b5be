"""
Lambda handler for AWS Lambda deployment.
Uses Mangum to adapt FastAPI to AWS Lambda's event format.
"""
import os
import tempfile


# Remove empty AWS credential environment variables so boto3 falls back to the
# execution role; AssumeRoleWithSAML itself is unsigned
for env_var in ['AWS_ACCESS_KEY_ID', 'AWS_SECRET_ACCESS_KEY', 'AWS_SESSION_TOKEN']:
    if env_var in os.environ and not os.environ[env_var]:
        print(f"Removing empty {env_var} environment variable")
        del os.environ[env_var]


# Only /tmp is writable on Lambda
if 'PREFERENCES_FILE' not in os.environ:
    os.environ['PREFERENCES_FILE'] = os.path.join(tempfile.gettempdir(), 'saml-access', 'preferences.json')


# Now import the app after setting up environment
from mangum import Mangum
from main import app


# Lambda handler - Mangum adapter wraps FastAPI app
# This makes FastAPI compatible with AWS Lambda/ALB events
handler = Mangum(app, lifespan="off")
