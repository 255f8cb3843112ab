# infra_cdk/app.py
import aws_cdk as cdk

from infra_cdk.project_cdk_stack import ProjectStack

app = cdk.App()
ProjectStack(app, "SaleAuditStack")
app.synth()
