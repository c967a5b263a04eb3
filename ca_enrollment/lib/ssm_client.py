"""SSM client for reading CA credentials from AWS Parameter Store."""

import boto3
from botocore.exceptions import ClientError

from .config import CACredentials
from .errors import ConfigurationError


class SSMClient:
    """SSM client for reading CA credentials (writes handled by Terraform)."""

    def __init__(self, region: str = "eu-west-2") -> None:
        """Initialize SSM client.

        Args:
            region: AWS region for SSM client
        """
        self.client = boto3.client("ssm", region_name=region)

    def get_ca_credentials(self, project_name: str, account: str) -> CACredentials:
        """Fetch CA login, password and customer URI from SSM.

        Args:
            project_name: Project name prefix (e.g., 'cert-enrollment')
            account: Account/environment name (e.g., 'sandbox')

        Returns:
            CACredentials built from the decrypted parameters

        Raises:
            ConfigurationError: If a parameter is not found
        """
        prefix = f"/{project_name}/{account}/sectigo"
        names = {
            "username": f"{prefix}/login",
            "password": f"{prefix}/password",
            "customer_uri": f"{prefix}/customer-uri",
        }

        values: dict[str, str] = {}
        try:
            for field_name, path in names.items():
                response = self.client.get_parameter(Name=path, WithDecryption=True)
                values[field_name] = response["Parameter"]["Value"].replace("\r", "")
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "")
            if error_code == "ParameterNotFound":
                raise ConfigurationError(
                    f"CA credentials not found in SSM. Paths checked: {', '.join(names.values())}"
                ) from e
            raise

        return CACredentials(**values)
