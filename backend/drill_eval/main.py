import logging

from fastapi import FastAPI

from .evaluator import DrillEvaluator
from .gateway import BackoffPolicy, ModelGateway
from .inference_client import InferenceClient
from .settings import settings
from .routers import drills

logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Drill Evaluation API")
app.include_router(drills.router)
app.state.evaluator = None
app.state.inference_client = None


@app.get("/info")
def root():
	return {"status": "ok", "inference_configured": bool(settings.inference_api_key)}


def build_evaluator(client: InferenceClient) -> DrillEvaluator:
	backoff = BackoffPolicy(
		strategy=settings.eval_backoff_strategy,
		base_delay_ms=settings.eval_base_delay_ms,
		max_delay_ms=settings.eval_max_delay_ms,
	)
	gateway = ModelGateway(client, max_retries=settings.eval_max_retries, backoff=backoff)
	return DrillEvaluator(gateway, default_timeout_ms=settings.eval_default_timeout_ms)


@app.on_event("startup")
async def startup_event():
	if not settings.inference_api_key:
		logger.warning("INFERENCE_API_KEY is not set; drill endpoints will answer 503")
		return
	# One shared client: the gateway holds no per-request state
	client = InferenceClient()
	app.state.inference_client = client
	app.state.evaluator = build_evaluator(client)


@app.on_event("shutdown")
async def shutdown_event():
	client = app.state.inference_client
	if client is not None:
		await client.aclose()
	app.state.inference_client = None
	app.state.evaluator = None
