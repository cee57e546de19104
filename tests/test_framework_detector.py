from routelens.repo.framework_detector import looks_like_express, looks_like_nestjs


def test_express_detected_by_import_or_require():
    assert looks_like_express("const express = require('express');")
    assert looks_like_express('import express from "express";')
    assert looks_like_express("import { Router } from 'express'")


def test_express_detected_by_verb_call_with_router_binding():
    assert looks_like_express("const app = create();\napp.get('/x', h);")
    assert looks_like_express("const router = make();\nrouter.post('/x', h)")


def test_express_detected_by_router_call():
    assert looks_like_express("const api = Router();")


def test_express_not_detected_for_plain_code():
    assert not looks_like_express("const m = new Map();\nm.get('key');")
    assert not looks_like_express("export const add = (a, b) => a + b;")


def test_nestjs_requires_package_and_decorator():
    both = "import { Controller, Get } from '@nestjs/common';\n@Controller('x') class A {}"
    assert looks_like_nestjs(both)
    assert not looks_like_nestjs("@Controller('x') class A {}")
    assert not looks_like_nestjs("import { Module } from '@nestjs/common';\nclass A {}")
