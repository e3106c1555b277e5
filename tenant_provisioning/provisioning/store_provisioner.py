from typing import Optional

from ..context.operation_context import operation
from ..context.request_context import RequestContext
from ..db.db_store_models import StockLocation
from ..schemas.entity_schemas import StockLocationCreate
from ..schemas.registration_schema import RegistrationInput
from ..services.stock_location_service import StockLocationService
from ..utils.logger import get_logger
from .context_adapter import ProvisioningContextAdapter
from .registration_auditor import RegistrationAuditor
from .registration_errors import RegistrationErrorCode, create_error, log_error, wrap_error
from .tenant_assignment import TenantAssignmentService


class StoreProvisioner:
    """Creates the first stock location of a new tenant."""

    def __init__(
        self,
        stock_location_service: Optional[StockLocationService] = None,
        context_adapter: Optional[ProvisioningContextAdapter] = None,
        assignment: Optional[TenantAssignmentService] = None,
        auditor: Optional[RegistrationAuditor] = None,
    ):
        self.stock_location_service = stock_location_service or StockLocationService()
        self.context_adapter = context_adapter or ProvisioningContextAdapter()
        self.assignment = assignment or TenantAssignmentService()
        self.auditor = auditor or RegistrationAuditor()
        self.logger = get_logger()

    @operation()
    def create_and_assign_store(
        self, ctx: RequestContext, data: RegistrationInput, tenant_id: str
    ) -> StockLocation:
        """
        Raises:
            RegistrationError: STORE_NAME_REQUIRED, STOCK_LOCATION_CREATE_FAILED
                or STOCK_LOCATION_ASSIGN_FAILED
        """
        store_name = (data.store_name or "").strip()
        if not store_name:
            raise create_error(
                RegistrationErrorCode.STORE_NAME_REQUIRED,
                "Store name is required and cannot be empty",
                tenant_id=tenant_id,
            )

        store_data = StockLocationCreate(
            name=store_name, description=(data.store_address or "").strip()
        )
        try:
            store = self.context_adapter.with_owning_party_scope(
                ctx,
                tenant_id,
                lambda scoped: self.stock_location_service.create(scoped, store_data),
                operation_name="create_stock_location",
            )
        except Exception as e:
            log_error(self.logger, "StoreProvisioner", e, "Stock location creation")
            raise wrap_error(
                e,
                RegistrationErrorCode.STOCK_LOCATION_CREATE_FAILED,
                f"Failed to create store '{store_name}'",
            )

        try:
            self.assignment.assign_stock_location_to_tenant(ctx, store.id, tenant_id)
        except Exception as e:
            log_error(self.logger, "StoreProvisioner", e, "Stock location assignment")
            raise wrap_error(
                e,
                RegistrationErrorCode.STOCK_LOCATION_ASSIGN_FAILED,
                f"Failed to assign stock location {store.id} to tenant {tenant_id}",
            )

        self.auditor.log_entity_created(
            ctx,
            "StockLocation",
            store.id,
            store,
            extra={"store_name": store_name},
            tenant_id=tenant_id,
        )
        return store
