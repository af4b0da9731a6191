import json

from storefront.domain.models.product import Product, ProductFields, parse_count, parse_url_list


def _doc(**overrides):
    doc = {
        "id": "p1",
        "title": "Mic",
        "image": "https://cdn.example/m.jpg",
        "images": json.dumps(["https://cdn.example/m.jpg"]),
        "description_images": json.dumps([]),
        "price": 1000,
    }
    doc.update(overrides)
    return doc


def test_parse_url_list_tolerates_bad_values():
    assert parse_url_list(None) == []
    assert parse_url_list("") == []
    assert parse_url_list("not json [") == []
    assert parse_url_list('{"a": 1}') == []
    assert parse_url_list('["x", 3, "", "y"]') == ["x", "y"]
    assert parse_url_list(["x"]) == ["x"]


def test_parse_count():
    assert parse_count("12 sold") == 12
    assert parse_count(None) == 0
    assert parse_count("none") == 0
    assert parse_count(7) == 7


def test_from_document_parses_text_arrays():
    p = Product.from_document(_doc(_id="mongo-id", description_images="garbage"))
    assert p.images == ["https://cdn.example/m.jpg"]
    assert p.description_images == []


def test_from_document_missing_arrays():
    doc = _doc()
    del doc["images"]
    del doc["description_images"]
    p = Product.from_document(doc)
    assert p.images == []
    assert p.description_images == []


def test_to_document_serializes_arrays():
    p = Product.from_document(_doc())
    doc = p.to_document()
    assert isinstance(doc["images"], str)
    assert json.loads(doc["images"]) == ["https://cdn.example/m.jpg"]


def test_wire_has_both_spellings():
    wire = Product.from_document(_doc(video_url="https://cdn.example/v.mp4")).to_wire()
    assert wire["videoUrl"] == wire["video_url"] == "https://cdn.example/v.mp4"
    assert wire["descriptionImages"] == wire["description_images"] == []
    assert "originalPrice" in wire and "original_price" in wire


def test_fields_accept_either_spelling():
    camel = ProductFields.model_validate({"videoUrl": "v", "originalPrice": 10, "descriptionImages": ["d"]})
    snake = ProductFields.model_validate({"video_url": "v", "original_price": 10, "description_images": ["d"]})
    assert camel == snake


def test_caps_keep_earliest_images():
    gallery = [f"https://cdn.example/{i}.jpg" for i in range(15)]
    described = [f"https://cdn.example/d{i}.jpg" for i in range(25)]
    p = Product.from_document(_doc(images=gallery, description_images=described))
    assert p.images == gallery[:10]
    assert p.description_images == described[:20]
