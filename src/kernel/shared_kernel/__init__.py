"""Shared Kernel module.

This module contains the modeling primitives every bounded context builds
on: entities, value objects, aggregate roots, domain events, and the broker
that dispatches those events once a unit of work commits.

Following Domain-Driven Design principles, the Shared Kernel is a small,
carefully managed set of components that contexts agree to depend on.
"""
