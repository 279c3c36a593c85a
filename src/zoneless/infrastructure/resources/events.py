from __future__ import annotations

from typing import Optional

from ...application.dtos import DeletedResponse, ListResponse, RequestOptions
from ...application.event_dtos import Event, ListEventsDTO
from ...application.resource_dtos import (
    CreateWebhookEndpointDTO,
    ListWebhookEndpointsDTO,
    UpdateWebhookEndpointDTO,
    WebhookEndpoint,
)
from .base import BaseResource, build_query


class Events(BaseResource):
    def retrieve(self, event_id: str, options: Optional[RequestOptions] = None) -> Event:
        return Event.model_validate(self._http.get(f"/events/{event_id}", options=options))

    def list(
        self,
        params: Optional[ListEventsDTO] = None,
        options: Optional[RequestOptions] = None,
    ) -> ListResponse[Event]:
        data = self._http.get("/events", build_query(params), options)
        return ListResponse[Event].model_validate(data)


class WebhookEndpoints(BaseResource):
    def create(
        self, dto: CreateWebhookEndpointDTO, options: Optional[RequestOptions] = None
    ) -> WebhookEndpoint:
        """Register an endpoint; the response carries the signing secret."""
        data = self._http.post("/webhook_endpoints", dto.model_dump(exclude_none=True), options)
        return WebhookEndpoint.model_validate(data)

    def retrieve(
        self, endpoint_id: str, options: Optional[RequestOptions] = None
    ) -> WebhookEndpoint:
        data = self._http.get(f"/webhook_endpoints/{endpoint_id}", options=options)
        return WebhookEndpoint.model_validate(data)

    def update(
        self,
        endpoint_id: str,
        dto: UpdateWebhookEndpointDTO,
        options: Optional[RequestOptions] = None,
    ) -> WebhookEndpoint:
        data = self._http.post(
            f"/webhook_endpoints/{endpoint_id}", dto.model_dump(exclude_unset=True), options
        )
        return WebhookEndpoint.model_validate(data)

    def delete(
        self, endpoint_id: str, options: Optional[RequestOptions] = None
    ) -> DeletedResponse:
        data = self._http.delete(f"/webhook_endpoints/{endpoint_id}", options)
        return DeletedResponse.model_validate(data)

    def list(
        self,
        params: Optional[ListWebhookEndpointsDTO] = None,
        options: Optional[RequestOptions] = None,
    ) -> ListResponse[WebhookEndpoint]:
        data = self._http.get("/webhook_endpoints", build_query(params), options)
        return ListResponse[WebhookEndpoint].model_validate(data)
