"""AnnoQ REST API client.

Region, rsID-list and gene lookups each come in three flavours: a paged
lookup (``/snp/...``), a count (``/count/...``) and a download
(``/snp/.../download``) used when all results are requested.
"""

from __future__ import annotations

from typing import Any, Iterable

import requests

from AnnoQ.core.models import DEFAULT_PAGE_SIZE, PaginationWindow, SnpRecord
from AnnoQ.sources.http import AnnoqHttpClient, require_key
from AnnoQ.sources.rest.fetch import download_url
from AnnoQ.sources.rest.fetch import fetch_all as download_all
from AnnoQ.sources.rest.query import (
    gene_params,
    join_filter_fields,
    region_params,
    rsid_params,
    selection_params,
)
from AnnoQ.utils.log import log

DEFAULT_BASE_URL = "https://api-v2-dev.annoq.org"

ATTRIBUTES_PATH = "/snpAttributes"
REGION_PATH = "/snp/chr"
RSID_LIST_PATH = "/snp/rsidList"
GENE_PATH = "/snp/gene_product"
COUNT_REGION_PATH = "/count/chr"
COUNT_RSID_LIST_PATH = "/count/rsidList"
COUNT_GENE_PATH = "/count/gene_product"

RESULTS_KEY = "results"
DETAILS_KEY = "details"


class RestApiClient:
    """Client for the AnnoQ REST endpoints.

    Args:
        base_url: Service root, e.g. ``https://api-v2-dev.annoq.org``.
        session: Optional ``requests.Session`` (or test double).
        timeout: Request timeout in seconds.
    """

    name = "rest"

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._http = AnnoqHttpClient(session, timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> RestApiClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def snp_attributes(self) -> Any:
        """Return the list of annotation attributes the service knows about."""
        payload = self._http.get_json(self._url(ATTRIBUTES_PATH))
        return require_key(payload, RESULTS_KEY)

    def region_query(
        self,
        chromosome: str,
        start: int | None = 1,
        end: int | None = 100000,
        *,
        fields: Any = None,
        filter_fields: Iterable[str] | None = None,
        pagination_from: int = 0,
        pagination_size: int = DEFAULT_PAGE_SIZE,
        fetch_all: bool = False,
    ) -> list[SnpRecord]:
        """Search SNPs by chromosome and position range.

        Args:
            chromosome: Chromosome id ("1".."22", "X").
            start: First position of the region.
            end: Last position of the region.
            fields: Field selection (list, JSON text or file path), at most 20 names.
            filter_fields: Fields that must be non-empty for a record to match.
            pagination_from: Offset of the first record.
            pagination_size: Number of records per page.
            fetch_all: Download every match instead of one page. Pagination
                arguments are ignored; at most 1,000,000 records are supported.

        Returns:
            Matching SNP records.

        Raises:
            InvalidArgumentError: On a bad window (``from + size > 10,000``)
                or too many fields; nothing is sent.
            RemoteError: On a non-2xx response.
            ProtocolError: If the response lacks the ``details`` key.
        """
        params = region_params(chromosome, start, end)
        return self._lookup(
            REGION_PATH,
            params,
            fields=fields,
            filter_fields=filter_fields,
            pagination_from=pagination_from,
            pagination_size=pagination_size,
            fetch_all=fetch_all,
        )

    def rsids_query(
        self,
        rsids: str | Iterable[str],
        *,
        fields: Any = None,
        filter_fields: Iterable[str] | None = None,
        pagination_from: int = 0,
        pagination_size: int = DEFAULT_PAGE_SIZE,
        fetch_all: bool = False,
    ) -> list[SnpRecord]:
        """Search SNPs by rsID; ``rsids`` is a comma-separated string or a sequence.

        See ``region_query`` for the remaining arguments and errors.
        """
        return self._lookup(
            RSID_LIST_PATH,
            rsid_params(rsids),
            fields=fields,
            filter_fields=filter_fields,
            pagination_from=pagination_from,
            pagination_size=pagination_size,
            fetch_all=fetch_all,
        )

    def gene_query(
        self,
        gene: str,
        *,
        fields: Any = None,
        filter_fields: Iterable[str] | None = None,
        pagination_from: int = 0,
        pagination_size: int = DEFAULT_PAGE_SIZE,
        fetch_all: bool = False,
    ) -> list[SnpRecord]:
        """Search SNPs associated with a gene id, gene symbol or UniProt id."""
        return self._lookup(
            GENE_PATH,
            gene_params(gene),
            fields=fields,
            filter_fields=filter_fields,
            pagination_from=pagination_from,
            pagination_size=pagination_size,
            fetch_all=fetch_all,
        )

    def count_region(
        self,
        chromosome: str,
        start: int | None = 1,
        end: int | None = 100000,
        *,
        filter_fields: Iterable[str] | None = None,
    ) -> Any:
        """Count SNPs in a chromosome region."""
        return self._count(COUNT_REGION_PATH, region_params(chromosome, start, end), filter_fields)

    def count_rsids(self, rsids: str | Iterable[str], *, filter_fields: Iterable[str] | None = None) -> Any:
        return self._count(COUNT_RSID_LIST_PATH, rsid_params(rsids), filter_fields)

    def count_gene(self, gene: str, *, filter_fields: Iterable[str] | None = None) -> Any:
        return self._count(COUNT_GENE_PATH, gene_params(gene), filter_fields)

    def _lookup(
        self,
        path: str,
        params: dict[str, str],
        *,
        fields: Any,
        filter_fields: Iterable[str] | None,
        pagination_from: int,
        pagination_size: int,
        fetch_all: bool,
    ) -> list[SnpRecord]:
        params.update(selection_params(fields=fields, filter_fields=filter_fields))

        if fetch_all:
            return download_all(self._http, download_url(self._url(path)), params)

        window = PaginationWindow(pagination_from, pagination_size)
        params.update(window.to_params())
        payload = self._http.get_json(self._url(path), params=params)
        details = require_key(payload, DETAILS_KEY)
        log.debug("REST %s returned %s records", path, len(details) if isinstance(details, list) else "?")
        return details

    def _count(self, path: str, params: dict[str, str], filter_fields: Iterable[str] | None) -> Any:
        joined = join_filter_fields(filter_fields)
        if joined:
            params["filter_fields"] = joined
        payload = self._http.get_json(self._url(path), params=params)
        return require_key(payload, DETAILS_KEY)

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"
