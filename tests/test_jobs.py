"""Tests for the background generation service."""

import threading
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import numpy as np
import pytest

from py_worldgen.api.jobs import GenerationService, JobStatus, create_executor
from py_worldgen.core.errors import ConfigurationError
from py_worldgen.core.region import Region
from py_worldgen.core.world_map import WorldMap


def tiny_world_dict(seed):
    world = WorldMap(
        width=2,
        height=1,
        grid=np.array([[0, -1]], dtype=np.int32),
        regions=[Region(id=0, coordinates=[(0, 0)], border=[(0, 0)], ocean_border=[(0, 0)])],
        seed=seed,
        continents=[[0]],
    )
    return world.to_dict()


class BlockingGenerator:
    """Stand-in for generate_world_dict that waits until released."""

    def __init__(self):
        self.release = threading.Event()
        self.started = threading.Event()

    def __call__(self, width, height, country_count, options):
        self.started.set()
        self.release.wait(5)
        return tiny_world_dict(width)


class TestGenerationService:
    """Test latest-request-wins behaviour."""

    @pytest.fixture
    def service(self):
        service = GenerationService(executor=ThreadPoolExecutor(max_workers=1))
        yield service
        service.shutdown(wait=True)

    def test_single_request_completes(self, service):
        with patch("py_worldgen.api.jobs.generate_world_dict", side_effect=lambda w, h, c, o: tiny_world_dict(7)):
            job = service.submit(10, 10, 1)
            finished = service.wait(job.id, timeout=5)

        assert finished.status == JobStatus.COMPLETED
        assert finished.seed == 7
        assert service.latest is not None
        assert service.latest_job_id == job.id
        assert service.latest.regions[0].coordinates == [(0, 0)]

    def test_newer_request_supersedes_older(self, service):
        generator = BlockingGenerator()
        with patch("py_worldgen.api.jobs.generate_world_dict", generator):
            first = service.submit(1, 1, 1)
            assert generator.started.wait(5)
            second = service.submit(2, 2, 1)  # queued behind first
            third = service.submit(3, 3, 1)  # cancels second
            generator.release.set()

            assert service.wait(first.id, timeout=5).status == JobStatus.SUPERSEDED
            assert service.wait(second.id, timeout=5).status == JobStatus.SUPERSEDED
            assert service.wait(third.id, timeout=5).status == JobStatus.COMPLETED

        assert service.generation == 3
        assert service.latest_job_id == third.id
        # Width is used as the seed by the stand-in generator
        assert service.latest.seed == 3

    def test_failure_reported(self, service):
        with patch(
            "py_worldgen.api.jobs.generate_world_dict",
            side_effect=ConfigurationError("country_count (9) exceeds available land cells (0)"),
        ):
            job = service.submit(10, 10, 9)
            finished = service.wait(job.id, timeout=5)

        assert finished.status == JobStatus.FAILED
        assert "exceeds available land" in finished.error_message
        assert service.latest is None

    def test_invalid_options_rejected_on_submit(self, service):
        with pytest.raises(ConfigurationError):
            service.submit(10, 10, 1, {"octaves": 0})
        assert service.generation == 0

    def test_unknown_job(self, service):
        assert service.get_job("missing") is None
        with pytest.raises(KeyError):
            service.wait("missing")

    def test_settled_history_is_capped(self):
        service = GenerationService(executor=ThreadPoolExecutor(max_workers=1), history_limit=2)
        try:
            with patch("py_worldgen.api.jobs.generate_world_dict", side_effect=lambda w, h, c, o: tiny_world_dict(w)):
                jobs = []
                for width in range(1, 6):
                    job = service.submit(width, 1, 1)
                    service.wait(job.id, timeout=5)
                    jobs.append(job)
        finally:
            service.shutdown(wait=True)

        # Latest job plus the two most recent other settled jobs
        assert service.get_job(jobs[-1].id) is not None
        assert service.get_job(jobs[-2].id) is not None
        assert service.get_job(jobs[-3].id) is not None
        assert service.get_job(jobs[0].id) is None
        assert service.get_job(jobs[1].id) is None
        assert service.latest.seed == 5
        with pytest.raises(KeyError):
            service.wait(jobs[0].id)

    def test_invalid_history_limit(self):
        with pytest.raises(ValueError):
            GenerationService(executor=ThreadPoolExecutor(max_workers=1), history_limit=0)

    def test_real_generation_in_thread(self, service):
        options = {"seed": 3, "threshold": -0.6, "min_island_size": 20, "min_country_size": 0}
        job = service.submit(40, 40, 2, options)
        finished = service.wait(job.id, timeout=60)

        assert finished.status == JobStatus.COMPLETED
        world = service.latest
        assert world.seed == 3
        world.validate(min_island_size=20)


class TestCreateExecutor:
    """Test executor construction."""

    def test_thread(self):
        executor = create_executor("thread", 2)
        assert isinstance(executor, ThreadPoolExecutor)
        executor.shutdown()

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            create_executor("fiber")
