# infra_cdk/project_cdk_stack.py
from aws_cdk import (
    Stack,
    Duration,
    CfnParameter,
    RemovalPolicy,
    aws_dynamodb as dynamodb,
    aws_lambda as _lambda,
    aws_apigatewayv2 as apigw,
    aws_apigatewayv2_integrations as apigw_integrations,
    aws_iam as iam,
    CfnOutput
)
from constructs import Construct

# Everything outside lambdas/ stays out of the function bundles
ASSET_EXCLUDES = ["cdk.out", "infra_cdk", "tests", "cli", "lambda_layer", ".venv", "*.md", "run_live.py"]


class ProjectStack(Stack):

    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # === Parameters for Deployment ===
        sender_email_param = CfnParameter(self, "VerifiedSenderEmail", type="String",
            description="The email address verified with SES to send audits from.")

        dashboard_key_param = CfnParameter(self, "DashboardSecretKey", type="String", no_echo=True,
            description="Shared secret the dashboard must pass as ?key=.")

        bedrock_model_param = CfnParameter(self, "BedrockModelId", type="String",
            default="amazon.nova-micro-v1:0",
            description="Bedrock model used to write the audits.")

        allowed_origin_param = CfnParameter(self, "AllowedOrigin", type="String", default="*",
            description="Value of Access-Control-Allow-Origin on API responses.")

        # === Shared Lambda Layer (pydantic, pydantic-settings) ===
        common_layer = _lambda.LayerVersion(self, "CommonLayer",
            code=_lambda.Code.from_asset("lambda_layer"),
            compatible_runtimes=[_lambda.Runtime.PYTHON_3_12],
            description="A shared layer for the lambdas"
        )

        # === Sales table ===
        sales_table = dynamodb.Table(self, "SalesTable",
            partition_key=dynamodb.Attribute(name="orderId", type=dynamodb.AttributeType.STRING),
            billing_mode=dynamodb.BillingMode.PAY_PER_REQUEST,
            removal_policy=RemovalPolicy.RETAIN,
        )
        sales_table.add_global_secondary_index(
            index_name="SortByTimestamp",
            partition_key=dynamodb.Attribute(name="gsi1pk", type=dynamodb.AttributeType.STRING),
            sort_key=dynamodb.Attribute(name="timestamp", type=dynamodb.AttributeType.STRING),
            projection_type=dynamodb.ProjectionType.ALL,
        )

        common_env = {
            "SALES_TABLE_NAME": sales_table.table_name,
            "SALES_INDEX_NAME": "SortByTimestamp",
            "ALLOWED_ORIGIN": allowed_origin_param.value_as_string,
        }

        # === Sale webhook ===
        process_sale_function = _lambda.Function(self, "ProcessSaleFunction",
            runtime=_lambda.Runtime.PYTHON_3_12,
            code=_lambda.Code.from_asset(".", exclude=ASSET_EXCLUDES),
            handler="lambdas.process_sale.app.handler",
            # Bedrock and SES are called inline before the webhook is answered
            timeout=Duration.seconds(60),
            environment={
                **common_env,
                "SENDER_EMAIL": sender_email_param.value_as_string,
                "BEDROCK_MODEL_ID": bedrock_model_param.value_as_string,
            },
            memory_size=512,
            layers=[common_layer]
        )
        sales_table.grant_write_data(process_sale_function)
        process_sale_function.add_to_role_policy(iam.PolicyStatement(actions=["bedrock:InvokeModel"], resources=["*"]))
        process_sale_function.add_to_role_policy(iam.PolicyStatement(actions=["ses:SendEmail", "ses:SendRawEmail"], resources=["*"]))

        # === Dashboard ===
        get_dashboard_function = _lambda.Function(self, "GetDashboardFunction",
            runtime=_lambda.Runtime.PYTHON_3_12,
            code=_lambda.Code.from_asset(".", exclude=ASSET_EXCLUDES),
            handler="lambdas.get_dashboard.app.handler",
            environment={
                **common_env,
                "DASHBOARD_SECRET_KEY": dashboard_key_param.value_as_string,
            },
            layers=[common_layer]
        )
        sales_table.grant_read_data(get_dashboard_function)

        # === HTTP API ===
        http_api = apigw.HttpApi(self, "SalesApi",
            cors_preflight={
                "allow_headers": ["Content-Type"],
                "allow_methods": [
                    apigw.CorsHttpMethod.GET,
                    apigw.CorsHttpMethod.POST,
                    apigw.CorsHttpMethod.OPTIONS
                ],
                "allow_origins": [allowed_origin_param.value_as_string],
            }
        )
        http_api.add_routes(
            path="/process-sale",
            # ANY, so wrong methods reach the handler and get its 405 JSON body
            methods=[apigw.HttpMethod.ANY],
            integration=apigw_integrations.HttpLambdaIntegration("ProcessSaleIntegration", handler=process_sale_function)
        )
        http_api.add_routes(
            path="/dashboard",
            methods=[apigw.HttpMethod.GET],
            integration=apigw_integrations.HttpLambdaIntegration("DashboardIntegration", handler=get_dashboard_function)
        )

        # === Outputs ===
        CfnOutput(self, "ApiSaleWebhookUrl", value=f"{http_api.url}process-sale", description="The URL the payment platform pings on each sale.")
        CfnOutput(self, "ApiDashboardUrl", value=f"{http_api.url}dashboard", description="The URL the dashboard reads from.")
