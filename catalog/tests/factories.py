import factory
from catalog.models import Category, Product
from factory import Faker
from factory.django import DjangoModelFactory


class CategoryFactory(DjangoModelFactory):
    class Meta:
        model = Category

    name = Faker("word")
    slug = factory.Sequence(lambda n: f"category-{n}")
    description = Faker("sentence")


class ProductFactory(DjangoModelFactory):
    class Meta:
        model = Product

    sku = factory.Sequence(lambda n: f"SKU-{n:05d}")
    name = Faker("sentence", nb_words=3)
    barcode = factory.Faker("ean")
    category = factory.SubFactory(CategoryFactory)
