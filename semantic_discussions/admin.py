from django.contrib import admin

from .models import Page, Post, SemanticFact, Topic, UpdateJob


@admin.register(Page)
class PageAdmin(admin.ModelAdmin):
    list_display = ('title', 'namespace', 'content_model', 'touched')
    list_filter = ('namespace', 'content_model')
    search_fields = ('title',)


@admin.register(Topic)
class TopicAdmin(admin.ModelAdmin):
    list_display = ('title', 'owner', 'creator', 'locked', 'modified_at')
    list_filter = ('locked',)
    search_fields = ('title', 'owner', 'subject')


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ('topic', 'author', 'reply_to', 'created_at')
    search_fields = ('author', 'content')


@admin.register(SemanticFact)
class SemanticFactAdmin(admin.ModelAdmin):
    list_display = ('subject', 'property', 'value_type', 'value')
    list_filter = ('property',)
    search_fields = ('subject', 'value')


admin.site.register(UpdateJob)
