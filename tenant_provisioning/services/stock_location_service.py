from ..context.operation_context import operation
from ..context.request_context import RequestContext
from ..db.db_store_models import StockLocation
from ..schemas.entity_schemas import StockLocationCreate
from .base_service import BaseService


class StockLocationService(BaseService):
    """Creates stock locations on behalf of the owner of the active tenant."""

    @operation()
    def create(self, ctx: RequestContext, data: StockLocationCreate) -> StockLocation:
        try:
            self._require_owning_party_scope(ctx, "create_stock_location")

            stock_location = StockLocation(name=data.name, description=data.description)
            ctx.session.add(stock_location)
            ctx.session.flush()

            self.logger.info(
                f"Created stock location: {stock_location.name}",
                extra={"stock_location_id": stock_location.id, "tenant_id": ctx.tenant_id},
            )
            return stock_location
        except Exception as e:
            self._handle_service_exception("create_stock_location", e)
