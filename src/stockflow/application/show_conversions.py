"""Application services: conversion queries (single record, history, stats)."""

from __future__ import annotations

from stockflow.application.dto import ConversionDTO, ConversionStatsDTO
from stockflow.domain.service.conversion_workflow import ConversionWorkflow


class ShowConversionHandler:

    def __init__(self, workflow: ConversionWorkflow) -> None:
        self._workflow = workflow

    def handle(self, conversion_id: int) -> ConversionDTO:
        return ConversionDTO.from_record(self._workflow.get(conversion_id))


class ConversionHistoryHandler:

    def __init__(self, workflow: ConversionWorkflow) -> None:
        self._workflow = workflow

    def handle(self, product_id: int) -> list[ConversionDTO]:
        return [ConversionDTO.from_record(r) for r in self._workflow.history(product_id)]


class ConversionStatsHandler:

    def __init__(self, workflow: ConversionWorkflow) -> None:
        self._workflow = workflow

    def handle(self, product_id: int) -> ConversionStatsDTO:
        return ConversionStatsDTO.from_stats(product_id, self._workflow.stats(product_id))
